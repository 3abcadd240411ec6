"""
Core value models for the CookingBTB app.

This module defines the pydantic schemas shared by the location provider, the
place search service, the recipe form and the backend API:

- Coordinate / Location: a geographic point and a timestamped position fix
- Region: a rectangular search area around a centre coordinate
- AuthorizationStatus: the user's location permission level
- MapItem: the opaque provider result behind a Place (kept for directions)
- Place: a display-ready search result
- Recipe: an immutable recipe created by the recipe form

# NOTE: Recipe and Place are frozen. A completed search replaces the whole
    Place list and a saved Recipe is never mutated.
"""

import math
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

# Mean Earth radius in metres (IUGG)
EARTH_RADIUS_METERS = 6_371_008.8

# Default search span in degrees (~5.5 km square at the equator)
DEFAULT_SPAN_DEGREES = 0.05

UNKNOWN_PLACE_NAME = "Unknown"

DIRECTIONS_BASE_URL = "https://www.openstreetmap.org/directions"
DIRECTIONS_ENGINE_DRIVING = "fossgis_osrm_car"


class Coordinate(BaseModel):
    """A WGS84 latitude/longitude pair in decimal degrees."""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    model_config = ConfigDict(frozen=True)

    def distance_to(self, other: "Coordinate") -> float:
        """
        Great-circle distance to another coordinate using the haversine formula.

        Args:
            other: Target coordinate

        Returns:
            Distance in metres
        """
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        dlat = lat2 - lat1
        dlon = math.radians(other.longitude - self.longitude)

        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


class Location(BaseModel):
    """A position fix reported by a location provider."""
    coordinate: Coordinate
    horizontal_accuracy: Optional[float] = Field(None, ge=0, description="Accuracy radius in metres")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: Optional[str] = Field(None, description="Provider that produced this fix (e.g. 'ip', 'static')")

    model_config = ConfigDict(frozen=True)

    def distance_to(self, other: "Location") -> float:
        """Distance in metres between two fixes."""
        return self.coordinate.distance_to(other.coordinate)


class Region(BaseModel):
    """A rectangular region described by a centre and a span in degrees."""
    center: Coordinate
    latitude_delta: float = Field(DEFAULT_SPAN_DEGREES, gt=0, le=180)
    longitude_delta: float = Field(DEFAULT_SPAN_DEGREES, gt=0, le=360)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def around(cls, center: Coordinate, span: float = DEFAULT_SPAN_DEGREES) -> "Region":
        """Build a square region of `span` degrees centred on `center`."""
        return cls(center=center, latitude_delta=span, longitude_delta=span)

    def viewbox(self) -> Tuple[float, float, float, float]:
        """
        Bounding box of the region as (west, north, east, south).

        Latitudes are clamped to [-90, 90]; longitudes are not wrapped.
        """
        half_lat = self.latitude_delta / 2
        half_lon = self.longitude_delta / 2
        west = self.center.longitude - half_lon
        east = self.center.longitude + half_lon
        north = min(90.0, self.center.latitude + half_lat)
        south = max(-90.0, self.center.latitude - half_lat)
        return (west, north, east, south)

    def contains(self, coordinate: Coordinate) -> bool:
        """Whether `coordinate` lies inside the region (edges included)."""
        west, north, east, south = self.viewbox()
        return south <= coordinate.latitude <= north and west <= coordinate.longitude <= east


class AuthorizationStatus(str, Enum):
    """Location permission level, mirrored from the location provider."""
    NOT_DETERMINED = "not_determined"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS = "authorized_always"
    DENIED = "denied"
    RESTRICTED = "restricted"

    @property
    def is_authorized(self) -> bool:
        return self in (AuthorizationStatus.AUTHORIZED_WHEN_IN_USE, AuthorizationStatus.AUTHORIZED_ALWAYS)


class MapItem(BaseModel):
    """
    Provider-level search result.

    This is the opaque handle a Place keeps around so the UI can open
    turn-by-turn directions for it. Connectors map their raw payload into this.
    """
    name: Optional[str] = Field(None, description="Explicit place name, if the provider has one")
    formatted_address: Optional[str] = Field(None, description="Human-readable address")
    coordinate: Coordinate
    provider: str = Field(..., description="Search provider identifier (e.g. 'nominatim')")
    provider_id: Optional[str] = Field(None, description="Provider-specific identifier")
    raw: Optional[Dict[str, Any]] = Field(None, description="Raw provider payload (for debugging)")

    model_config = ConfigDict(frozen=True)

    def directions_url(self, origin: Optional[Coordinate] = None) -> str:
        """
        Driving directions URL from `origin` (or the user's choice) to this item.

        Args:
            origin: Optional start coordinate; when omitted only the destination is set

        Returns:
            OpenStreetMap directions URL
        """
        destination = f"{self.coordinate.latitude},{self.coordinate.longitude}"
        start = f"{origin.latitude},{origin.longitude}" if origin is not None else ""
        query = urlencode({"engine": DIRECTIONS_ENGINE_DRIVING, "route": f"{start};{destination}"})
        return f"{DIRECTIONS_BASE_URL}?{query}"


def display_name_for(item: MapItem) -> str:
    """
    Pick a display name for a map item.

    Precedence: explicit name, then formatted address, then "Unknown".
    Empty strings count as missing.
    """
    if item.name:
        return item.name
    if item.formatted_address:
        return item.formatted_address
    return UNKNOWN_PLACE_NAME


class Place(BaseModel):
    """A grocery store (or other POI) ready to be shown on the map and list."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    coordinate: Coordinate
    map_item: MapItem

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_map_item(cls, item: MapItem) -> "Place":
        return cls(name=display_name_for(item), coordinate=item.coordinate, map_item=item)


class Recipe(BaseModel):
    """A saved recipe. Created by the recipe form and never mutated afterwards."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique recipe identifier")
    title: str = Field(..., description="Recipe title")
    est_time: str = Field(default="", description="Free-text time estimate (e.g. '45 minutes')")
    serves: int = Field(default=1, ge=1, description="Number of people served (estimate)")
    ingredients: List[str] = Field(default_factory=list, description="Ordered ingredient lines")
    steps: List[str] = Field(default_factory=list, description="Ordered preparation steps")
    rating: int = Field(default=0, ge=0, le=5, description="Star rating out of 5 (0 = unrated)")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "0b0d8c1e-6f55-4f43-9a43-8a2b0f1c2d3e",
                "title": "Pasta",
                "est_time": "20 minutes",
                "serves": 2,
                "ingredients": ["Pasta", "Salt"],
                "steps": ["Boil water", "Cook pasta"],
                "rating": 4,
            }
        },
    )
