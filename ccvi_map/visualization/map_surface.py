"""
Map Surface Module

A folium map with a base tile layer and a single replaceable region layer.
"""

from pathlib import Path
from typing import Optional, Sequence

import folium
from folium.map import FitBounds

from ccvi_map.visualization.color_scheme import get_color_scheme_info
from ccvi_map.visualization.region_layer import RegionLayer

# Fixed child names: adding a child under an existing name replaces it
# in place, which swaps the old layer for the new one in a single step.
LAYER_CHILD_NAME = 'region_layer'
FIT_BOUNDS_CHILD_NAME = 'region_fit_bounds'
LEGEND_CHILD_NAME = 'region_legend'


def build_legend_html(indicator_id: str) -> str:
    """
    Build legend HTML for an indicator.

    Parameters
    ----------
    indicator_id : str
        Selected indicator

    Returns
    -------
    str
        Positioned legend box
    """
    color_info = get_color_scheme_info(indicator_id)

    legend_html = f"""
    <div style="position: fixed;
                bottom: 50px; right: 50px; width: 220px; height: auto;
                background-color: white; border:2px solid grey; z-index:9999;
                font-size:14px; padding: 10px">
    <h4 style="margin-top:0">{color_info['title']}</h4>
    """

    for range_info in color_info['ranges']:
        legend_html += f"""
        <p style="margin: 5px 0;">
            <i class="fa fa-square" style="color:{range_info['color']}"></i>
            {range_info['label']}
        </p>
        """

    legend_html += """
    </div>
    """
    return legend_html


class MapSurface:
    """
    Folium map owning at most one region layer.

    Parameters
    ----------
    center : Sequence[float]
        Initial [lat, lon] center
    zoom_start : int, optional
        Initial zoom level (default: 5)
    tiles : str, optional
        Base tile layer (default: 'OpenStreetMap')
    container : folium.Figure, optional
        Figure to attach the map to (default: the map's own figure)
    """

    def __init__(
        self,
        center: Sequence[float],
        zoom_start: int = 5,
        tiles: str = 'OpenStreetMap',
        container: Optional[folium.Figure] = None
    ):
        self.map = folium.Map(location=list(center), zoom_start=zoom_start, tiles=None)
        folium.TileLayer(tiles, name='Base map').add_to(self.map)
        self.container = container
        if container is not None:
            container.add_child(self.map)
        self.layer: Optional[RegionLayer] = None

    def install_layer(self, layer: RegionLayer, padding: int = 20) -> None:
        """
        Replace the current region layer.

        All folium elements are built before anything on the map changes, so
        a failure here leaves the previous layer displayed.

        Parameters
        ----------
        layer : RegionLayer
            New layer
        padding : int, optional
            Padding in pixels when fitting the view to the layer (default: 20)
        """
        if len(layer.collection):
            element = layer.to_folium()
        else:
            element = folium.FeatureGroup(name=get_color_scheme_info(layer.indicator_id)['title'])
        legend = folium.Element(build_legend_html(layer.indicator_id))
        bounds = layer.bounds

        self.map.add_child(element, name=LAYER_CHILD_NAME)
        self.map.get_root().html.add_child(legend, name=LEGEND_CHILD_NAME)
        if bounds is not None:
            south, west, north, east = bounds
            self.map.add_child(
                FitBounds([[south, west], [north, east]], padding=(padding, padding)),
                name=FIT_BOUNDS_CHILD_NAME
            )
        else:
            # An empty layer keeps the current view
            self.map._children.pop(FIT_BOUNDS_CHILD_NAME, None)
        self.layer = layer

    @property
    def fit_bounds(self) -> Optional[FitBounds]:
        """The FitBounds element of the current layer, None if there is none."""
        return self.map._children.get(FIT_BOUNDS_CHILD_NAME)

    @property
    def layer_element(self):
        """The folium element currently holding the regions."""
        return self.map._children.get(LAYER_CHILD_NAME)

    def save(self, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.map.save(str(output_path))
        return output_path

    def remove(self) -> None:
        """Detach the map from its container and drop the layer."""
        if self.container is not None:
            # branca has no public API for removing a child
            self.container._children.pop(self.map.get_name(), None)
        self.layer = None
