"""
Choropleth Renderer Module

Owns the map surface and keeps its region layer in step with the most
recent (boundary, indicator) selection.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

import folium

from ccvi_map.data.fallback import AGGREGATE_INDICATOR
from ccvi_map.data.provider import DataProvider
from ccvi_map.models import RegionCollection, RenderRequest
from ccvi_map.utils.logging import get_logger
from ccvi_map.visualization.map_surface import MapSurface
from ccvi_map.visualization.region_layer import RegionLayer

logger = get_logger(__name__)

DEFAULT_CENTER = (30.3753, 69.3451)

DataLoadCallback = Callable[[RegionCollection], Any]


class ChoroplethRenderer:
    """
    Choropleth map of one region layer driven by a DataProvider.

    Each call to :meth:`set_render_request` starts a load cycle. Cycles are
    not queued: a cycle whose request has been superseded by a newer one
    discards its result instead of installing it.

    Parameters
    ----------
    provider : DataProvider
        Source of region data
    on_data_load : callable, optional
        Called with the collection of every installed (winning) cycle
    center : Sequence[float], optional
        Default [lat, lon] view center
    zoom_start : int, optional
        Default zoom level
    tiles : str, optional
        Base tile layer
    fit_padding : int, optional
        Padding in pixels when fitting the view to new data
    boundary_id : str, optional
        Initial boundary level
    indicator_id : str, optional
        Initial indicator
    """

    def __init__(
        self,
        provider: DataProvider,
        on_data_load: Optional[DataLoadCallback] = None,
        center: Sequence[float] = DEFAULT_CENTER,
        zoom_start: int = 5,
        tiles: str = 'OpenStreetMap',
        fit_padding: int = 20,
        boundary_id: str = 'district',
        indicator_id: str = AGGREGATE_INDICATOR
    ):
        self.provider = provider
        self.on_data_load = on_data_load
        self.center = tuple(center)
        self.zoom_start = zoom_start
        self.tiles = tiles
        self.fit_padding = fit_padding
        self.request = RenderRequest(boundary_id, indicator_id)

        self.surface: Optional[MapSurface] = None
        self.collection: Optional[RegionCollection] = None
        self.is_loading = False
        self.error: Optional[str] = None
        self._generation = 0

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        provider: Optional[DataProvider] = None,
        on_data_load: Optional[DataLoadCallback] = None,
        boundary_id: Optional[str] = None,
        indicator_id: Optional[str] = None
    ) -> 'ChoroplethRenderer':
        """
        Create a renderer from the ``map`` and ``defaults`` sections of a configuration.

        ``boundary_id`` and ``indicator_id`` override the configured initial selection.
        """
        map_config = config.get('map', {})
        defaults = config.get('defaults', {})
        return cls(
            provider=provider if provider is not None else DataProvider.from_config(config),
            on_data_load=on_data_load,
            center=[float(value) for value in map_config.get('center', DEFAULT_CENTER)],
            zoom_start=int(map_config.get('zoom_start', 5)),
            tiles=map_config.get('tiles', 'OpenStreetMap'),
            fit_padding=int(map_config.get('fit_padding', 20)),
            boundary_id=boundary_id or defaults.get('boundary', 'district'),
            indicator_id=indicator_id or defaults.get('indicator', AGGREGATE_INDICATOR),
        )

    @property
    def layer(self) -> Optional[RegionLayer]:
        return self.surface.layer if self.surface is not None else None

    async def initialize(self, container: Optional[folium.Figure] = None) -> None:
        """
        Create the map surface and run the initial load cycle.

        Does nothing if the surface already exists; call :meth:`teardown`
        to release it first.
        """
        if self.surface is not None:
            return
        self.surface = MapSurface(
            center=self.center,
            zoom_start=self.zoom_start,
            tiles=self.tiles,
            container=container
        )
        await self._load(self.request)

    async def set_render_request(self, boundary_id: str, indicator_id: str) -> None:
        """
        Select a boundary level and indicator and load their data.

        Before :meth:`initialize` (or after :meth:`teardown`) the selection is
        only recorded; the next :meth:`initialize` loads it.
        """
        self.request = RenderRequest(boundary_id, indicator_id)
        if self.surface is None:
            logger.debug("No map surface yet, deferring %s/%s", boundary_id, indicator_id)
            return
        await self._load(self.request)

    async def on_boundary_change(self, boundary_id: str) -> None:
        await self.set_render_request(boundary_id, self.request.indicator_id)

    async def on_indicator_change(self, indicator_id: str) -> None:
        await self.set_render_request(self.request.boundary_id, indicator_id)

    def teardown(self) -> None:
        """Release the map surface and its layer."""
        if self.surface is not None:
            self.surface.remove()
        self.surface = None
        self.collection = None
        self.is_loading = False
        # Any cycle still in flight now belongs to a released surface
        self._generation += 1

    def save(self, output_path: Path) -> Path:
        """
        Write the current map to a standalone HTML file.

        Raises
        ------
        RuntimeError
            If the renderer has not been initialized
        """
        if self.surface is None:
            raise RuntimeError("Renderer is not initialized")
        return self.surface.save(output_path)

    async def _load(self, request: RenderRequest) -> None:
        self._generation += 1
        generation = self._generation

        self.is_loading = True
        self.error = None

        try:
            collection = await self.provider.fetch_region_data(
                request.boundary_id, request.indicator_id
            )
            if generation != self._generation:
                logger.debug(
                    "Discarding superseded result for %s/%s",
                    request.boundary_id, request.indicator_id
                )
                return
            if self.surface is None:
                raise RuntimeError("Renderer is not initialized")
            layer = RegionLayer(collection, request.indicator_id)
            self.surface.install_layer(layer, padding=self.fit_padding)
        except Exception as e:
            if generation != self._generation:
                return
            logger.exception(
                "Failed to render %s/%s", request.boundary_id, request.indicator_id
            )
            self.error = f"Failed to render map data: {e}"
            self.is_loading = False
            return

        self.collection = collection
        self.is_loading = False
        logger.info(
            "Rendered %d regions for %s/%s%s",
            len(collection), request.boundary_id, request.indicator_id,
            " (fallback data)" if collection.is_fallback else ""
        )

        if self.on_data_load is not None:
            self.on_data_load(collection)
