"""
Data Model Module

Region features, collections and catalog entries shared by the data
provider and the map renderer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass
class RegionFeature:
    """One geographic region with its normalized scores."""
    id: str
    name: str
    vulnerability_score: float
    geometry: Dict[str, Any]
    population: Optional[int] = None
    area: Optional[float] = None
    exposure: Optional[float] = None
    sensitivity: Optional[float] = None
    adaptive_capacity: Optional[float] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    score_is_placeholder: bool = False

    def __post_init__(self):
        """Validate the feature after initialization."""
        if not 0.0 <= self.vulnerability_score <= 1.0:
            raise ValueError(
                f"vulnerability_score must be in [0, 1], got {self.vulnerability_score}"
            )
        if not self.geometry:
            raise ValueError(f"Feature {self.id!r} has no geometry")

    @property
    def component_scores(self) -> Dict[str, float]:
        """Sub-indicator scores that are present on this feature."""
        components = {
            'exposure': self.exposure,
            'sensitivity': self.sensitivity,
            'adaptive_capacity': self.adaptive_capacity,
        }
        return {key: value for key, value in components.items() if value is not None}

    def to_geojson(self) -> Dict[str, Any]:
        """
        Convert to a GeoJSON Feature.

        Pass-through properties are written first so the normalized fields
        always win over raw server values with the same key.
        """
        properties = dict(self.properties)
        properties.update({
            'id': self.id,
            'name': self.name,
            'vulnerability_score': self.vulnerability_score,
        })
        properties.update(self.component_scores)
        if self.population is not None:
            properties['population'] = self.population
        if self.area is not None:
            properties['area'] = self.area
        return {
            'type': 'Feature',
            'id': self.id,
            'properties': properties,
            'geometry': self.geometry,
        }


@dataclass
class RegionCollection:
    """Ordered regions loaded for one (boundary, indicator) request."""
    boundary_id: str
    indicator_id: str
    features: List[RegionFeature] = field(default_factory=list)
    is_fallback: bool = False

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[RegionFeature]:
        return iter(self.features)

    def get(self, feature_id: str) -> Optional[RegionFeature]:
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        return None

    def to_geojson(self) -> Dict[str, Any]:
        return {
            'type': 'FeatureCollection',
            'features': [feature.to_geojson() for feature in self.features],
        }


@dataclass(frozen=True)
class BoundaryOption:
    """Administrative division level offered by the data service."""
    id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class IndicatorOption:
    """Scalar metric offered by the data service."""
    id: str
    name: str
    description: Optional[str] = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class RenderRequest:
    """The (boundary, indicator) pair driving one fetch and render cycle."""
    boundary_id: str
    indicator_id: str

    def as_params(self) -> Dict[str, str]:
        return {'boundary': self.boundary_id, 'indicator': self.indicator_id}


# (south, west, north, east) in degrees
Bounds = Tuple[float, float, float, float]
