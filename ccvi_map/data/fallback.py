"""
Fallback Data Module

Built-in catalogs and the synthetic region fixture used whenever the data
service cannot be reached or answers with something unusable.
"""

from typing import List, Optional

import numpy as np

from ccvi_map.models import BoundaryOption, IndicatorOption, RegionCollection, RegionFeature

AGGREGATE_INDICATOR = 'climate_vulnerability'

FALLBACK_BOUNDARIES = (
    BoundaryOption(id='district', name='District'),
    BoundaryOption(id='tehsil', name='Tehsil'),
    BoundaryOption(id='union_council', name='Union Council'),
)

FALLBACK_INDICATORS = (
    IndicatorOption(
        id=AGGREGATE_INDICATOR,
        name='Climate Vulnerability Index',
        description='Overall climate vulnerability assessment'
    ),
    IndicatorOption(
        id='exposure',
        name='Exposure',
        description='Degree of climate stress upon a system',
        unit='Index (0-1)'
    ),
    IndicatorOption(
        id='sensitivity',
        name='Sensitivity',
        description='Degree to which a system is affected by climate stimuli',
        unit='Index (0-1)'
    ),
    IndicatorOption(
        id='adaptive_capacity',
        name='Adaptive Capacity',
        description='Ability of a system to adjust to climate change',
        unit='Index (0-1)'
    ),
    IndicatorOption(
        id='heat_stress',
        name='Heat Stress',
        description='Temperature-related climate stress'
    ),
    IndicatorOption(
        id='drought_risk',
        name='Drought Risk',
        description='Water scarcity and drought vulnerability'
    ),
    IndicatorOption(
        id='flood_risk',
        name='Flood Risk',
        description='Flooding and water excess vulnerability'
    ),
)

# Provinces and territories of Pakistan, center given as (lon, lat)
FALLBACK_REGIONS = (
    {'name': 'Punjab', 'center': (74.3587, 31.5204),
     'vulnerability': 0.7, 'exposure': 0.8, 'sensitivity': 0.6, 'adaptive_capacity': 0.4},
    {'name': 'Sindh', 'center': (68.8242, 25.8943),
     'vulnerability': 0.8, 'exposure': 0.9, 'sensitivity': 0.7, 'adaptive_capacity': 0.3},
    {'name': 'Khyber Pakhtunkhwa', 'center': (71.4696, 34.0151),
     'vulnerability': 0.6, 'exposure': 0.7, 'sensitivity': 0.5, 'adaptive_capacity': 0.5},
    {'name': 'Balochistan', 'center': (66.9756, 28.3949),
     'vulnerability': 0.9, 'exposure': 0.95, 'sensitivity': 0.8, 'adaptive_capacity': 0.2},
    {'name': 'Gilgit-Baltistan', 'center': (74.4641, 35.9042),
     'vulnerability': 0.4, 'exposure': 0.5, 'sensitivity': 0.4, 'adaptive_capacity': 0.7},
    {'name': 'Azad Kashmir', 'center': (73.4548, 33.6844),
     'vulnerability': 0.5, 'exposure': 0.6, 'sensitivity': 0.4, 'adaptive_capacity': 0.6},
)

# Half-width of each fixture square, in degrees
FALLBACK_HALF_WIDTH = 1.5

POPULATION_RANGE = (1_000_000, 11_000_000)
AREA_RANGE = (10_000, 110_000)


def fallback_boundaries() -> List[BoundaryOption]:
    return list(FALLBACK_BOUNDARIES)


def fallback_indicators() -> List[IndicatorOption]:
    return list(FALLBACK_INDICATORS)


def square_polygon(lon: float, lat: float, half_width: float = FALLBACK_HALF_WIDTH) -> dict:
    """Closed square Polygon centered on (lon, lat)."""
    ring = [
        [lon - half_width, lat - half_width],
        [lon + half_width, lat - half_width],
        [lon + half_width, lat + half_width],
        [lon - half_width, lat + half_width],
        [lon - half_width, lat - half_width],
    ]
    return {'type': 'Polygon', 'coordinates': [ring]}


def build_fallback_collection(
    boundary_id: str,
    indicator_id: str,
    rng: Optional[np.random.Generator] = None
) -> RegionCollection:
    """
    Build the synthetic six-region collection.

    Names, scores and geometry are fixed. Population and area are drawn
    from ``rng`` on every call, so two calls differ only in those fields.

    Parameters
    ----------
    boundary_id : str
        Boundary level of the failed request
    indicator_id : str
        Indicator of the failed request
    rng : np.random.Generator, optional
        Source for population and area (default: fresh unseeded generator)

    Returns
    -------
    RegionCollection
        Collection flagged with ``is_fallback=True``
    """
    rng = rng if rng is not None else np.random.default_rng()

    features = []
    for index, region in enumerate(FALLBACK_REGIONS):
        lon, lat = region['center']
        features.append(RegionFeature(
            id=f"region_{index}",
            name=region['name'],
            vulnerability_score=region['vulnerability'],
            exposure=region['exposure'],
            sensitivity=region['sensitivity'],
            adaptive_capacity=region['adaptive_capacity'],
            population=int(rng.integers(*POPULATION_RANGE)),
            area=float(rng.integers(*AREA_RANGE)),
            geometry=square_polygon(lon, lat),
        ))

    return RegionCollection(
        boundary_id=boundary_id,
        indicator_id=indicator_id,
        features=features,
        is_fallback=True
    )
