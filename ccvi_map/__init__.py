"""
CCVI Map

Climate vulnerability choropleth maps fed by the CCVI data service, with
deterministic fallback data when the service is unavailable.
"""

from ccvi_map.data.provider import DataProvider
from ccvi_map.models import (
    BoundaryOption,
    IndicatorOption,
    RegionCollection,
    RegionFeature,
    RenderRequest,
)
from ccvi_map.visualization.renderer import ChoroplethRenderer

__version__ = "0.1.0"

__all__ = [
    'BoundaryOption',
    'ChoroplethRenderer',
    'DataProvider',
    'IndicatorOption',
    'RegionCollection',
    'RegionFeature',
    'RenderRequest'
]
