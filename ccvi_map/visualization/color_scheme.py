"""
Color Scheme Module

Defines the color scale for each indicator and the value each indicator
reads from a region.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from ccvi_map.models import RegionFeature

NO_DATA_COLOR = "#808080"

# Upper bound of each bucket except the last. A value equal to a break
# belongs to the bucket above it (inclusive lower bound).
BUCKET_BREAKS = (0.2, 0.4, 0.6, 0.8)

RANGE_LABELS = ("0-20%", "20-40%", "40-60%", "60-80%", "80-100%")

GREEN_TO_RED = ("#22c55e", "#84cc16", "#eab308", "#f97316", "#ef4444")


@dataclass(frozen=True)
class ColorScale:
    """Five-bucket step scale with its legend."""
    title: str
    colors: Tuple[str, ...]
    labels: Tuple[str, ...]
    breaks: Tuple[float, ...] = BUCKET_BREAKS

    def bucket(self, value: float) -> int:
        return bisect_right(self.breaks, value)

    def color(self, value: float) -> str:
        if value is None or np.isnan(value):
            return NO_DATA_COLOR
        return self.colors[self.bucket(float(value))]


def _labels(*names: str) -> Tuple[str, ...]:
    return tuple(f"{name} ({rng})" for name, rng in zip(names, RANGE_LABELS))


_RISK_LABELS = _labels("Very Low", "Low", "Medium", "High", "Very High")

VULNERABILITY_SCALE = ColorScale(
    title="Climate Vulnerability Index",
    colors=GREEN_TO_RED,
    labels=_RISK_LABELS,
)

INDICATOR_SCALES: Dict[str, ColorScale] = {
    'climate_vulnerability': VULNERABILITY_SCALE,
    'heat_stress': ColorScale("Heat Stress", GREEN_TO_RED, _RISK_LABELS),
    'drought_risk': ColorScale("Drought Risk", GREEN_TO_RED, _RISK_LABELS),
    'flood_risk': ColorScale("Flood Risk", GREEN_TO_RED, _RISK_LABELS),
    # Higher adaptive capacity is better, so the ramp runs red to green
    'adaptive_capacity': ColorScale(
        title="Adaptive Capacity",
        colors=tuple(reversed(GREEN_TO_RED)),
        labels=_labels("Very Low", "Low", "Moderate", "High", "Very High"),
    ),
    'exposure': ColorScale(
        title="Exposure",
        colors=("#fff7ed", "#fed7aa", "#fb923c", "#ea580c", "#9a3412"),
        labels=_labels("Minimal", "Low", "Moderate", "High", "Severe"),
    ),
    'sensitivity': ColorScale(
        title="Sensitivity",
        colors=("#faf5ff", "#e9d5ff", "#c084fc", "#9333ea", "#6b21a8"),
        labels=_labels("Minimal", "Low", "Moderate", "High", "Severe"),
    ),
}


def get_color_scale(indicator_id: str) -> ColorScale:
    """
    Get the color scale for an indicator.

    Unknown indicators use the vulnerability scale.
    """
    return INDICATOR_SCALES.get(indicator_id, VULNERABILITY_SCALE)


def get_indicator_value(feature: RegionFeature, indicator_id: str) -> float:
    """
    Get the scalar an indicator shades a region by.

    - adaptive_capacity: the component if present, else 1 - vulnerability
    - exposure / sensitivity: the component if present, else vulnerability
    - anything else: the vulnerability score

    Parameters
    ----------
    feature : RegionFeature
        Normalized region
    indicator_id : str
        Selected indicator

    Returns
    -------
    float
        Value in [0, 1]
    """
    if indicator_id == 'adaptive_capacity':
        if feature.adaptive_capacity is not None:
            return feature.adaptive_capacity
        return 1.0 - feature.vulnerability_score

    if indicator_id in ('exposure', 'sensitivity'):
        value = getattr(feature, indicator_id)
        return value if value is not None else feature.vulnerability_score

    return feature.vulnerability_score


def get_color_for_value(value: float, indicator_id: str) -> str:
    """
    Get the fill color for an indicator value.

    Parameters
    ----------
    value : float
        Indicator value (0-1)
    indicator_id : str
        Selected indicator

    Returns
    -------
    str
        Hex color code, gray for NaN
    """
    return get_color_scale(indicator_id).color(value)


def get_color_scheme_info(indicator_id: str) -> dict:
    """
    Get legend information for an indicator.

    Returns
    -------
    dict
        Title and one entry per bucket with min, max, color and label
    """
    scale = get_color_scale(indicator_id)
    edges = (0.0,) + tuple(scale.breaks) + (1.0,)
    return {
        "title": scale.title,
        "ranges": [
            {"min": edges[i], "max": edges[i + 1], "color": color, "label": label}
            for i, (color, label) in enumerate(zip(scale.colors, scale.labels))
        ]
    }
