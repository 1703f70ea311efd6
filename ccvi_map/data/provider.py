"""
Data Provider Module

Fetches boundary and indicator catalogs and region features from the CCVI
data service. Every public call is fail-soft: transport errors, non-success
status codes and unusable payloads are logged and replaced by built-in
fallback data, never raised to the caller.
"""

import asyncio
from typing import Any, Dict, List, Optional, Type, TypeVar

import numpy as np
import requests

from ccvi_map.data.fallback import (
    build_fallback_collection,
    fallback_boundaries,
    fallback_indicators,
)
from ccvi_map.data.normalization import normalize_collection
from ccvi_map.models import BoundaryOption, IndicatorOption, RegionCollection, RenderRequest
from ccvi_map.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = 'https://pakwmis.iwmi.org/iwmi-ccvi/backend'

OptionT = TypeVar('OptionT', BoundaryOption, IndicatorOption)


def _parse_options(payload: Any, option_type: Type[OptionT]) -> List[OptionT]:
    """
    Parse a catalog payload into option objects.

    Raises
    ------
    ValueError
        If the payload is not a list of objects with 'id' and 'name'
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON list, got {type(payload).__name__}")

    allowed = set(option_type.__dataclass_fields__)
    options = []
    for entry in payload:
        if not isinstance(entry, dict) or entry.get('id') is None or entry.get('name') is None:
            raise ValueError(f"Invalid catalog entry: {entry!r}")
        values = {key: entry[key] for key in allowed if entry.get(key) is not None}
        values['id'] = str(values['id'])
        values['name'] = str(values['name'])
        options.append(option_type(**values))
    return options


class DataProvider:
    """
    Client for the CCVI data service.

    Parameters
    ----------
    base_url : str, optional
        Root URL of the service (default: the IWMI CCVI backend)
    session : requests.Session, optional
        HTTP session used for all requests (default: a new session)
    timeout : float, optional
        Per-request timeout in seconds (default: None, wait indefinitely)
    rng : np.random.Generator, optional
        Random source for placeholder scores and fallback population/area
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs) -> 'DataProvider':
        """
        Create a provider from the ``api`` section of a loaded configuration.
        """
        api_config = config.get('api', {})
        timeout = api_config.get('timeout')
        return cls(
            base_url=api_config.get('base_url', DEFAULT_BASE_URL),
            timeout=float(timeout) if timeout not in (None, '') else None,
            **kwargs
        )

    def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        GET a JSON document from the service.

        Raises
        ------
        requests.RequestException
            On transport failure or non-success status
        ValueError
            If the body is not valid JSON
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    async def _fetch(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        # requests is blocking, keep it off the event loop
        return await asyncio.to_thread(self._get_json, path, params)

    async def list_boundaries(self) -> List[BoundaryOption]:
        """
        List the boundary levels offered by the service.

        Returns
        -------
        List[BoundaryOption]
            Catalog from the service, or the built-in catalog on any failure
        """
        try:
            payload = await self._fetch('boundaries')
            return _parse_options(payload, BoundaryOption)
        except Exception as e:
            logger.warning("Error fetching boundary types, using built-in catalog: %s", e)
            return fallback_boundaries()

    async def list_indicators(self) -> List[IndicatorOption]:
        """
        List the indicators offered by the service.

        Returns
        -------
        List[IndicatorOption]
            Catalog from the service, or the built-in catalog on any failure
        """
        try:
            payload = await self._fetch('indicators')
            return _parse_options(payload, IndicatorOption)
        except Exception as e:
            logger.warning("Error fetching indicators, using built-in catalog: %s", e)
            return fallback_indicators()

    async def fetch_region_data(self, boundary_id: str, indicator_id: str) -> RegionCollection:
        """
        Fetch and normalize the regions for a boundary level and indicator.

        Parameters
        ----------
        boundary_id : str
            Boundary level id (e.g. 'district')
        indicator_id : str
            Indicator id (e.g. 'climate_vulnerability')

        Returns
        -------
        RegionCollection
            Normalized regions, or the synthetic fallback collection if the
            request fails or the response is not a FeatureCollection
        """
        request = RenderRequest(boundary_id, indicator_id)
        try:
            payload = await self._fetch('data', request.as_params())
            collection = normalize_collection(payload, boundary_id, indicator_id, rng=self.rng)
        except Exception as e:
            logger.warning(
                "Error fetching CCVI data for %s/%s, using fallback regions: %s",
                boundary_id, indicator_id, e
            )
            return build_fallback_collection(boundary_id, indicator_id, rng=self.rng)

        logger.info(
            "Loaded %d regions for %s/%s", len(collection), boundary_id, indicator_id
        )
        return collection
