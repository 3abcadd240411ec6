"""
Distance conversion and formatting utilities.

Pure helpers used by the Shopping page to label each grocery store with how far
away it is. All functions are stateless and have no side effects.

# NOTE: Distances under 0.1 miles are shown in whole feet, anything else in
    miles with one decimal place.
"""

from typing import Optional, Union

from cookbook.models import Coordinate, Location

METERS_PER_MILE = 1609.344
FEET_PER_METER = 3.28084

# Below this many miles the label switches to feet
FEET_THRESHOLD_MILES = 0.1


def meters_to_miles(meters: float) -> float:
    """Convert metres to statute miles."""
    return meters / METERS_PER_MILE


def meters_to_feet(meters: float) -> float:
    """Convert metres to feet."""
    return meters * FEET_PER_METER


def format_distance(meters: float) -> str:
    """
    Format a distance in metres as a short "... away" label.

    Args:
        meters: Distance in metres (non-negative)

    Returns:
        "<n> ft away" (rounded to an integer) when under 0.1 miles,
        otherwise "<n.n> mi away"

    Examples:
        >>> format_distance(50)
        '164 ft away'
        >>> format_distance(1609.344)
        '1.0 mi away'
    """
    miles = meters_to_miles(meters)
    if miles < FEET_THRESHOLD_MILES:
        return f"{meters_to_feet(meters):.0f} ft away"
    return f"{miles:.1f} mi away"


def distance_string(
    user_location: Optional[Union[Location, Coordinate]],
    coordinate: Coordinate,
) -> str:
    """
    Distance label from the user's position to `coordinate`.

    Returns an empty string when the user's position is unknown.
    """
    if user_location is None:
        return ""
    origin = user_location.coordinate if isinstance(user_location, Location) else user_location
    return format_distance(origin.distance_to(coordinate))
