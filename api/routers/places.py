"""
Places router for the grocery store search endpoint.

This router provides:
- GET /places/search - Search for grocery stores near a coordinate

The search runs through the same LocalSearchService the frontend uses, so the
endpoint waits for the background query and drains its result queue before
answering. Provider failures are returned as 502 with the provider's message.
"""

import logging
from concurrent.futures import wait

from fastapi import APIRouter, HTTPException, Query, status

from api.config import PlaceSearchConfig
from api.schemas import CoordinateOut, PlaceOut, PlaceSearchResponse
from cookbook.connectors.nominatim_connector import MAX_LIMIT, NominatimConnector
from cookbook.models import Coordinate, Place
from cookbook.search import GROCERY_STORE_QUERY, LocalSearchService
from cookbook.utils.distance import distance_string

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/places", tags=["places"])


def get_place_search_connector() -> NominatimConnector:
    """Build the place search connector from configuration."""
    return NominatimConnector(
        base_url=PlaceSearchConfig.get_url(),
        user_agent=PlaceSearchConfig.get_user_agent(),
        timeout=PlaceSearchConfig.get_timeout(),
    )


def place_to_out(place: Place, center: Coordinate) -> PlaceOut:
    item = place.map_item
    return PlaceOut(
        id=place.id,
        name=place.name,
        latitude=place.coordinate.latitude,
        longitude=place.coordinate.longitude,
        address=item.formatted_address,
        provider=item.provider,
        provider_id=item.provider_id,
        distance=distance_string(center, place.coordinate),
        directions_url=item.directions_url(origin=center),
        raw=item.raw,
    )


@router.get(
    "/search",
    response_model=PlaceSearchResponse,
    summary="Search for grocery stores near a coordinate",
    description="Runs a single point-of-interest query in a ~5.5 km square around the coordinate. "
                "No caching, pagination or retry.",
)
def search_places(
    lat: float = Query(..., ge=-90, le=90, description="Latitude of the search centre"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude of the search centre"),
    limit: int = Query(
        min(PlaceSearchConfig.get_result_limit(), MAX_LIMIT),
        ge=1,
        le=MAX_LIMIT,
        description="Maximum number of results",
    ),
) -> PlaceSearchResponse:
    """
    Search for grocery stores around (lat, lon).

    Args:
        lat: Latitude of the search centre
        lon: Longitude of the search centre
        limit: Maximum number of results (default: PLACE_SEARCH_LIMIT, max: 40)

    Returns:
        PlaceSearchResponse with one PlaceOut per store, in provider order

    Raises:
        HTTPException 502: If the place search provider fails

    Example:
        ```bash
        GET /places/search?lat=37.3349&lon=-122.0090
        ```
    """
    center = Coordinate(latitude=lat, longitude=lon)
    connector = get_place_search_connector()
    service = LocalSearchService(connector, limit=limit)

    try:
        future = service.search_grocery_stores(center)
        wait([future])
    finally:
        connector.close()
    service.main_queue.drain()

    if service.error_message is not None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=service.error_message,
        )

    return PlaceSearchResponse(
        query=GROCERY_STORE_QUERY,
        center=CoordinateOut(latitude=lat, longitude=lon),
        results=[place_to_out(place, center) for place in service.results],
    )
