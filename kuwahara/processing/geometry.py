"""Window geometry and tile partitioning."""

from typing import List

from ..core import Region, WindowGeometry


def resolve_window_geometry(radius: int) -> WindowGeometry:
    """
    Derive the accumulation block size and window offset from a radius.

    The sliding window is normally odd-sized; an even radius is rounded
    down to the next odd window.

    Args:
        radius: User radius, already validated to [3, 199]

    Returns:
        WindowGeometry with kernel_size == kernel_offset + 1
    """
    radius = int(radius)
    if radius & 1:
        return WindowGeometry(kernel_size=(radius + 1) // 2, kernel_offset=(radius - 1) // 2)
    return WindowGeometry(kernel_size=radius // 2, kernel_offset=(radius - 2) // 2)


def split_into_tiles(region: Region, tile_width: int, tile_height: int) -> List[Region]:
    """
    Partition a region into disjoint tiles in row-major order.

    Edge tiles are clipped to the region, so the tiles cover it exactly.
    """
    if tile_width <= 0 or tile_height <= 0:
        raise ValueError(f"Tile size must be positive, got {tile_width}x{tile_height}")
    if region.is_empty():
        return []

    tiles = []
    for top in range(region.top, region.bottom, tile_height):
        bottom = min(top + tile_height, region.bottom)
        for left in range(region.left, region.right, tile_width):
            right = min(left + tile_width, region.right)
            tiles.append(Region(left, top, right, bottom))
    return tiles
