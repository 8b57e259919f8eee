import pytest

from kuwahara.core import RADIUS_MAX, RADIUS_MIN, Region
from kuwahara.processing import resolve_window_geometry, split_into_tiles


def test_odd_radius_geometry():
    geometry = resolve_window_geometry(3)
    assert (geometry.kernel_size, geometry.kernel_offset) == (2, 1)


def test_even_radius_geometry():
    geometry = resolve_window_geometry(4)
    assert (geometry.kernel_size, geometry.kernel_offset) == (2, 1)


@pytest.mark.parametrize("radius, expected", [
    (7, (4, 3)),
    (8, (4, 3)),
    (198, (99, 98)),
    (199, (100, 99)),
])
def test_geometry_table(radius, expected):
    geometry = resolve_window_geometry(radius)
    assert (geometry.kernel_size, geometry.kernel_offset) == expected


def test_size_is_offset_plus_one_for_every_radius():
    for radius in range(RADIUS_MIN, RADIUS_MAX + 1):
        geometry = resolve_window_geometry(radius)
        assert geometry.kernel_size == geometry.kernel_offset + 1


def test_tiles_cover_region_exactly():
    region = Region(3, 2, 20, 13)
    tiles = split_into_tiles(region, 8, 5)

    covered = set()
    for tile in tiles:
        assert region.contains(tile)
        pixels = {(x, y) for x in range(tile.left, tile.right) for y in range(tile.top, tile.bottom)}
        assert not covered & pixels
        covered |= pixels

    assert len(covered) == region.width * region.height
    assert tiles[0] == Region(3, 2, 11, 7)
    assert tiles[-1] == Region(19, 12, 20, 13)


def test_tiles_of_empty_region():
    assert split_into_tiles(Region(5, 5, 5, 9), 4, 4) == []


def test_tiles_reject_bad_size():
    with pytest.raises(ValueError):
        split_into_tiles(Region(0, 0, 4, 4), 0, 4)
