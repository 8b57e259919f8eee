"""
Kuwahara Toolkit

Edge-preserving Kuwahara noise reduction for 8-bit RGB(A) images, with
tiled parallel rendering and an OpenImageIO front end.
"""

from .core import (
    CancellationToken,
    FilterParameters,
    Region,
    RenderStatus,
    WindowSelection,
    KuwaharaError,
)
from .processing import KuwaharaFilter, KuwaharaRenderer, kuwahara_filter
from .services import Settings, TileRunner, configure_logging

__version__ = "1.0.0"

__all__ = [
    "CancellationToken",
    "FilterParameters",
    "Region",
    "RenderStatus",
    "WindowSelection",
    "KuwaharaError",
    "KuwaharaFilter",
    "KuwaharaRenderer",
    "kuwahara_filter",
    "Settings",
    "TileRunner",
    "configure_logging",
]
