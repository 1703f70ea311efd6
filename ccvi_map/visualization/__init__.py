"""
Visualization Module

Color scales, styled region layers and the choropleth renderer.
"""

from ccvi_map.visualization.color_scheme import (
    get_color_for_value,
    get_color_scheme_info,
    get_indicator_value,
)
from ccvi_map.visualization.region_layer import RegionLayer
from ccvi_map.visualization.renderer import ChoroplethRenderer

__all__ = [
    'ChoroplethRenderer',
    'RegionLayer',
    'get_color_for_value',
    'get_color_scheme_info',
    'get_indicator_value'
]
