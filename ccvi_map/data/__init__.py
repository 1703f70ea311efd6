"""
Data Module

Fetching, normalization and fallback data for CCVI regions.
"""

from ccvi_map.data.fallback import build_fallback_collection, fallback_boundaries, fallback_indicators
from ccvi_map.data.normalization import normalize_collection, normalize_feature, normalize_score
from ccvi_map.data.provider import DataProvider

__all__ = [
    'DataProvider',
    'build_fallback_collection',
    'fallback_boundaries',
    'fallback_indicators',
    'normalize_collection',
    'normalize_feature',
    'normalize_score'
]
