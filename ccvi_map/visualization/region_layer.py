"""
Region Layer Module

Styled, interactive view of a RegionCollection for one indicator: base
style and popup per region, hover state, and the matching folium layer.
"""

from typing import Any, Dict, Optional

import folium
from folium.utilities import JsCode
from shapely.geometry import shape

from ccvi_map.models import Bounds, RegionCollection
from ccvi_map.visualization.color_scheme import (
    get_color_for_value,
    get_color_scale,
    get_indicator_value,
)
from ccvi_map.visualization.popup import build_popup_html

BASE_STYLE = {
    'weight': 2,
    'opacity': 1,
    'color': 'white',
    'fillOpacity': 0.7,
}

HIGHLIGHT_STYLE = {
    'weight': 3,
    'color': '#666',
    'fillOpacity': 0.9,
}

POPUP_PROPERTY = 'popup_html'

# Opens the region popup while the pointer is over it; the outline
# emphasis and reset come from folium's highlight handling.
HOVER_POPUP_JS = JsCode(f"""
function(feature, layer) {{
    layer.bindPopup(feature.properties.{POPUP_PROPERTY});
    layer.on({{
        mouseover: function(e) {{ e.target.openPopup(); }},
        mouseout: function(e) {{ e.target.closePopup(); }}
    }});
}}
""")


class RegionLayer:
    """
    Regions of one collection styled for one indicator.

    ``base_styles`` holds the computed style of each region and
    ``current_styles`` what is displayed right now, which differs from the
    base only for the hovered region.
    """

    def __init__(self, collection: RegionCollection, indicator_id: Optional[str] = None):
        self.collection = collection
        self.indicator_id = indicator_id or collection.indicator_id
        self.popups = {feature.id: build_popup_html(feature) for feature in collection}
        self.values: Dict[str, float] = {}
        self.base_styles: Dict[str, Dict[str, Any]] = {}
        self.current_styles: Dict[str, Dict[str, Any]] = {}
        self.hovered: Optional[str] = None
        self.active_popup: Optional[str] = None
        self._compute_styles()

    def _compute_styles(self) -> None:
        for feature in self.collection:
            value = get_indicator_value(feature, self.indicator_id)
            self.values[feature.id] = value
            self.base_styles[feature.id] = dict(
                BASE_STYLE, fillColor=get_color_for_value(value, self.indicator_id)
            )
        for feature_id, style in self.base_styles.items():
            if feature_id == self.hovered:
                self.current_styles[feature_id] = dict(style, **HIGHLIGHT_STYLE)
            else:
                self.current_styles[feature_id] = dict(style)

    def restyle(self, indicator_id: str) -> None:
        """
        Recompute every base style for another indicator.

        Public hook for callers that recolor already loaded regions without
        a new fetch; popups and bounds are unchanged. A region that is hovered
        keeps its highlight until the pointer leaves, then resets to the new
        base style.
        """
        self.indicator_id = indicator_id
        self._compute_styles()

    def style_for(self, feature_id: str) -> Dict[str, Any]:
        return dict(self.base_styles[feature_id])

    def on_enter(self, feature_id: str) -> None:
        """Pointer entered a region: emphasize its outline and show its popup."""
        self.hovered = feature_id
        self.current_styles[feature_id] = dict(self.base_styles[feature_id], **HIGHLIGHT_STYLE)
        self.active_popup = self.popups[feature_id]

    def on_leave(self, feature_id: str) -> None:
        """Pointer left a region: reset it to its computed style and close the popup."""
        self.current_styles[feature_id] = self.style_for(feature_id)
        if self.hovered == feature_id:
            self.hovered = None
            self.active_popup = None

    @property
    def bounds(self) -> Optional[Bounds]:
        """Combined (south, west, north, east) bounds, None for an empty layer."""
        boxes = [shape(feature.geometry).bounds for feature in self.collection]
        if not boxes:
            return None
        west = min(box[0] for box in boxes)
        south = min(box[1] for box in boxes)
        east = max(box[2] for box in boxes)
        north = max(box[3] for box in boxes)
        return south, west, north, east

    def to_geojson(self) -> Dict[str, Any]:
        data = self.collection.to_geojson()
        for feature in data['features']:
            feature['properties']['indicator_value'] = self.values[feature['id']]
            feature['properties'][POPUP_PROPERTY] = self.popups[feature['id']]
        return data

    def to_folium(self) -> folium.GeoJson:
        """
        Build the folium layer.

        Styles are looked up by region id at render time, so leaflet's
        style reset on mouseout returns to the computed base style.
        """
        return folium.GeoJson(
            data=self.to_geojson(),
            name=get_color_scale(self.indicator_id).title,
            style_function=lambda feature: self.style_for(feature['id']),
            highlight_function=lambda feature: dict(HIGHLIGHT_STYLE),
            on_each_feature=HOVER_POPUP_JS,
        )
