"""
Normalization Module

Turns raw server GeoJSON into RegionCollections: picks identity, name and
score fields among their naming variants, scales scores into [0, 1] and
drops features whose geometry is not a polygon or multi-polygon.
"""

import uuid
from typing import Any, Dict, Mapping, Optional

import numpy as np
from shapely.errors import ShapelyError
from shapely.geometry import shape

from ccvi_map.data.field_lookup import (
    AREA_KEYS,
    COMPONENT_KEYS,
    ID_KEYS,
    NAME_KEYS,
    POPULATION_KEYS,
    SCORE_KEYS,
    first_parsed,
    first_present,
    parse_float,
    parse_non_negative_float,
    parse_non_negative_int,
)
from ccvi_map.models import RegionCollection, RegionFeature
from ccvi_map.utils.logging import get_logger

logger = get_logger(__name__)

ACCEPTED_GEOMETRY_TYPES = ('Polygon', 'MultiPolygon')

DEFAULT_NAME = 'Unknown Area'


class MalformedResponseError(ValueError):
    """Raised when a feature payload is not a GeoJSON FeatureCollection."""


def normalize_score(value: float) -> float:
    """
    Scale a raw score into [0, 1].

    Values above 1 are read as percentages and divided by 100; values in
    [0, 1] are returned unchanged, so the function is idempotent on
    normalized input. The result is clamped to [0, 1].

    Parameters
    ----------
    value : float
        Raw score

    Returns
    -------
    float
        Normalized score
    """
    score = value / 100.0 if value > 1 else value
    return min(max(float(score), 0.0), 1.0)


def is_supported_geometry(geometry: Any) -> bool:
    """
    Check that a GeoJSON geometry is a non-empty Polygon or MultiPolygon.

    Parameters
    ----------
    geometry : Any
        Raw ``geometry`` member of a feature

    Returns
    -------
    bool
        True if the geometry parses and has an accepted type
    """
    if not isinstance(geometry, Mapping):
        return False
    if geometry.get('type') not in ACCEPTED_GEOMETRY_TYPES:
        return False
    try:
        geom = shape(geometry)
    except (ShapelyError, ValueError, TypeError, IndexError, KeyError, AttributeError):
        return False
    return not geom.is_empty


def normalize_feature(
    raw: Any,
    rng: Optional[np.random.Generator] = None
) -> Optional[RegionFeature]:
    """
    Normalize one raw GeoJSON feature.

    Parameters
    ----------
    raw : Any
        Raw feature as decoded from JSON
    rng : np.random.Generator, optional
        Source for the placeholder score used when no score field parses

    Returns
    -------
    RegionFeature or None
        The normalized feature, None if it has to be dropped
    """
    if not isinstance(raw, Mapping):
        return None

    geometry = raw.get('geometry')
    if not is_supported_geometry(geometry):
        logger.debug("Dropping feature with unsupported geometry: %r",
                     geometry.get('type') if isinstance(geometry, Mapping) else geometry)
        return None

    properties = raw.get('properties')
    if not isinstance(properties, Mapping):
        properties = {}

    used = set()

    match = first_present(properties, ID_KEYS)
    if match is not None:
        used.add(match[0])
        feature_id = str(match[1])
    elif raw.get('id') is not None:
        feature_id = str(raw['id'])
    else:
        feature_id = f"feature_{uuid.uuid4().hex}"
        logger.warning("Feature has no id field, using placeholder %s", feature_id)

    match = first_present(properties, NAME_KEYS)
    if match is not None:
        used.add(match[0])
        name = str(match[1])
    else:
        name = DEFAULT_NAME

    score_match = first_parsed(properties, SCORE_KEYS, parse_float)
    if score_match is not None:
        used.add(score_match[0])
        score = normalize_score(score_match[1])
        placeholder = False
    else:
        rng = rng if rng is not None else np.random.default_rng()
        score = float(rng.random())
        placeholder = True
        logger.warning(
            "No score field found for feature %s (%s), assigned random placeholder %.3f",
            feature_id, name, score
        )

    components: Dict[str, float] = {}
    for field_name, keys in COMPONENT_KEYS.items():
        match = first_parsed(properties, keys, parse_float)
        if match is not None:
            used.add(match[0])
            components[field_name] = normalize_score(match[1])

    population = None
    match = first_parsed(properties, POPULATION_KEYS, parse_non_negative_int)
    if match is not None:
        used.add(match[0])
        population = match[1]

    area = None
    match = first_parsed(properties, AREA_KEYS, parse_non_negative_float)
    if match is not None:
        used.add(match[0])
        area = match[1]

    extra = {key: value for key, value in properties.items() if key not in used}

    return RegionFeature(
        id=feature_id,
        name=name,
        vulnerability_score=score,
        geometry=dict(geometry),
        population=population,
        area=area,
        properties=extra,
        score_is_placeholder=placeholder,
        **components
    )


def normalize_collection(
    payload: Any,
    boundary_id: str,
    indicator_id: str,
    rng: Optional[np.random.Generator] = None
) -> RegionCollection:
    """
    Normalize a raw FeatureCollection payload.

    Parameters
    ----------
    payload : Any
        Decoded JSON body of the data endpoint
    boundary_id : str
        Boundary level the payload was requested for
    indicator_id : str
        Indicator the payload was requested for
    rng : np.random.Generator, optional
        Source for placeholder scores

    Returns
    -------
    RegionCollection
        Normalized regions; features with a repeated id replace the earlier one

    Raises
    ------
    MalformedResponseError
        If the payload is not a FeatureCollection with a features list
    """
    if not isinstance(payload, Mapping) or payload.get('type') != 'FeatureCollection':
        raise MalformedResponseError("Response is not a GeoJSON FeatureCollection")
    raw_features = payload.get('features')
    if not isinstance(raw_features, list):
        raise MalformedResponseError("FeatureCollection has no features list")

    by_id: Dict[str, RegionFeature] = {}
    dropped = 0
    for raw in raw_features:
        feature = normalize_feature(raw, rng=rng)
        if feature is None:
            dropped += 1
            continue
        if feature.id in by_id:
            logger.warning("Duplicate feature id %s, keeping the last one", feature.id)
        by_id[feature.id] = feature

    if dropped:
        logger.info("Dropped %d of %d features with unusable geometry", dropped, len(raw_features))

    return RegionCollection(
        boundary_id=boundary_id,
        indicator_id=indicator_id,
        features=list(by_id.values())
    )
