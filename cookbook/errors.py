"""
Exception types raised by the cookbook package.

Location and search failures are surfaced to the user as a plain message
(str(error)); they are not classified any further.
"""


class CookbookError(Exception):
    """Base class for all cookbook errors."""
    pass


class LocationError(CookbookError):
    """
    Raised (or reported to a LocationManager) when a position fix fails.

    This covers:
    - Requesting a location without permission
    - The location service being unreachable or timing out
    - The location service answering with an unusable payload
    """
    pass


class PlaceSearchError(CookbookError):
    """Raised by place search connectors when a POI query fails."""
    pass


class RecipeFormError(CookbookError, ValueError):
    """Raised when a recipe draft is saved while title, ingredients or steps are blank."""
    pass
