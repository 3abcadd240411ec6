"""
Place search connector for the OpenStreetMap Nominatim API.

This connector runs free-text point-of-interest queries against Nominatim's
/search endpoint and normalizes the hits into MapItem objects.

The connector:
- Sends the query with format=jsonv2 and addressdetails=1
- Restricts results to the requested region via viewbox + bounded=1
- Maps "name" -> MapItem.name and "display_name" -> MapItem.formatted_address
- Skips hits without a usable coordinate or outside the region
- Wraps transport and payload problems in PlaceSearchError

Nominatim's usage policy requires an identifying User-Agent. Set
NOMINATIM_USER_AGENT in .env for anything beyond local development.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from cookbook.errors import PlaceSearchError
from cookbook.models import Coordinate, MapItem, Region

from .base import BasePlaceSearchConnector

logger = logging.getLogger(__name__)

DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_USER_AGENT = "CookingBTB/1.0 (local development)"
DEFAULT_TIMEOUT_SECONDS = 15.0

# Nominatim caps limit at 40
MAX_LIMIT = 40


class NominatimConnector(BasePlaceSearchConnector):
    """Connector for the Nominatim free-text search API."""
    provider = "nominatim"

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the Nominatim connector.

        Args:
            base_url: Search endpoint (optional, reads NOMINATIM_URL env var)
            user_agent: User-Agent header (optional, reads NOMINATIM_USER_AGENT env var)
            timeout: Request timeout in seconds (optional, reads NOMINATIM_TIMEOUT_SECONDS env var)
            session: Optional requests.Session to reuse connections
        """
        self.base_url = base_url or os.getenv("NOMINATIM_URL", DEFAULT_NOMINATIM_URL)
        self.user_agent = user_agent or os.getenv("NOMINATIM_USER_AGENT", DEFAULT_USER_AGENT)
        self.timeout = timeout or float(os.getenv("NOMINATIM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        self.session = session or requests.Session()

    def search(self, query: str, region: Region, limit: int = 20) -> List[MapItem]:
        if limit <= 0:
            return []

        west, north, east, south = region.viewbox()
        params: Dict[str, Any] = {
            "q": query,
            "format": "jsonv2",
            "addressdetails": 1,
            "viewbox": f"{west},{north},{east},{south}",
            "bounded": 1,
            "limit": min(limit, MAX_LIMIT),
        }

        logger.info("Nominatim search: query=%r center=(%.4f, %.4f) limit=%d",
                    query, region.center.latitude, region.center.longitude, params["limit"])

        try:
            response = self.session.get(
                self.base_url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.Timeout as e:
            raise PlaceSearchError("The place search timed out.") from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else "unknown"
            raise PlaceSearchError(f"The place search failed with status {status_code}.") from e
        except requests.exceptions.RequestException as e:
            raise PlaceSearchError(f"Could not reach the place search service: {e}") from e
        except ValueError as e:
            raise PlaceSearchError("The place search service returned an invalid response.") from e

        if not isinstance(payload, list):
            raise PlaceSearchError("The place search service returned an unexpected response.")

        items: List[MapItem] = []
        for hit in payload:
            item = self._to_map_item(hit)
            if item is None:
                continue
            if not region.contains(item.coordinate):
                logger.debug("Skipping Nominatim hit outside the region: %r", hit.get("place_id"))
                continue
            items.append(item)
        return items

    def close(self) -> None:
        self.session.close()

    def _to_map_item(self, hit: Any) -> Optional[MapItem]:
        """Map one Nominatim hit to a MapItem, or None if it has no usable coordinate."""
        if not isinstance(hit, dict):
            return None
        try:
            coordinate = Coordinate(latitude=float(hit["lat"]), longitude=float(hit["lon"]))
        except (KeyError, TypeError, ValueError, ValidationError):
            logger.debug("Skipping Nominatim hit without coordinate: %r", hit.get("place_id"))
            return None

        osm_type = hit.get("osm_type")
        osm_id = hit.get("osm_id")
        provider_id = f"{osm_type}:{osm_id}" if osm_type and osm_id is not None else None

        return MapItem(
            name=hit.get("name") or None,
            formatted_address=hit.get("display_name") or None,
            coordinate=coordinate,
            provider=self.provider,
            provider_id=provider_id,
            raw=hit,
        )
