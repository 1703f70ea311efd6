"""
Popup Content Module

HTML summary shown when the pointer is over a region.
"""

from html import escape
from typing import Optional

from ccvi_map.models import RegionFeature

COMPONENT_LABELS = (
    ('exposure', 'Exposure'),
    ('sensitivity', 'Sensitivity'),
    ('adaptive_capacity', 'Adaptive Capacity'),
)


def format_percent(value: float) -> str:
    return f"{value * 100:.1f}%"


def format_count(value: Optional[float], unit: str = "") -> str:
    if value is None:
        return "N/A"
    return f"{value:,.0f}{unit}"


def build_popup_html(feature: RegionFeature) -> str:
    """
    Build popup content for a region.

    Lists the name, overall vulnerability score, the sub-scores present on
    the feature, population and area.
    """
    rows = [f"<p style=\"margin: 4px 0;\">Vulnerability Score: {format_percent(feature.vulnerability_score)}</p>"]

    components = feature.component_scores
    for key, label in COMPONENT_LABELS:
        if key in components:
            rows.append(f"<p style=\"margin: 4px 0;\">{label}: {format_percent(components[key])}</p>")

    rows.append(f"<p style=\"margin: 4px 0;\">Population: {format_count(feature.population)}</p>")
    rows.append(f"<p style=\"margin: 4px 0;\">Area: {format_count(feature.area, ' km²')}</p>")

    return (
        "<div style=\"padding: 8px;\">"
        f"<h4 style=\"margin: 0 0 8px 0;\">{escape(feature.name)}</h4>"
        + "".join(rows)
        + "</div>"
    )
