"""
Processing system for the Kuwahara toolkit.

Provides the Kuwahara edge-preserving noise reduction filter: window
geometry, mean/variance accumulation, window selection, and the tile
renderer that ties them together. The OIIO executor lives in
kuwahara.processing.executor.
"""

from .geometry import resolve_window_geometry, split_into_tiles
from .intensity import (
    INTENSITY_LOOKUP_TABLE,
    hsv_to_rgb,
    intensity_of,
    rgb_to_hue_saturation,
)
from .statistics import StatisticsTables, accumulate_intensity, accumulate_rgb
from .selector import select_intensity, select_rgb
from .renderer import KuwaharaRenderer, composite, kuwahara_filter
from .filters import (
    FilterParameter,
    KuwaharaFilter,
    ParameterType,
    ProcessingFilter,
)

__all__ = [
    "resolve_window_geometry",
    "split_into_tiles",
    "INTENSITY_LOOKUP_TABLE",
    "hsv_to_rgb",
    "intensity_of",
    "rgb_to_hue_saturation",
    "StatisticsTables",
    "accumulate_intensity",
    "accumulate_rgb",
    "select_intensity",
    "select_rgb",
    "KuwaharaRenderer",
    "composite",
    "kuwahara_filter",
    # Filters
    "FilterParameter",
    "KuwaharaFilter",
    "ParameterType",
    "ProcessingFilter",
]
