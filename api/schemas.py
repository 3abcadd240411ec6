"""
Pydantic schemas for FastAPI request and response models.

The schemas include:
- RecipeCreate: Input model for saving a recipe (mirrors the recipe form)
- RecipeListResponse: List of saved recipes
- PlaceOut / PlaceSearchResponse: Grocery store search results
- StatusOut: A home screen status tile

# NOTE: Recipe itself (cookbook.models.Recipe) is used directly as the response
    model for a single recipe.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cookbook.models import Recipe
from cookbook.recipes import MAX_RATING, MAX_SERVES, MIN_SERVES


class RecipeCreate(BaseModel):
    """
    Input model for creating a recipe.

    Blank ingredient and step lines are accepted here and dropped on save; the
    request is rejected only when title, ingredients or steps are blank overall.
    """
    title: str = Field(..., description="Recipe title")
    est_time: str = Field(default="", description="Free-text time estimate (e.g. '45 minutes')")
    serves: int = Field(default=MIN_SERVES, ge=MIN_SERVES, le=MAX_SERVES, description="Number of people served")
    ingredients: List[str] = Field(default_factory=lambda: [""], description="Ingredient lines")
    steps: List[str] = Field(default_factory=lambda: [""], description="Step lines")
    rating: int = Field(default=0, ge=0, le=MAX_RATING, description="Star rating out of 5 (0 = unrated)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Pasta",
                "est_time": "20 minutes",
                "serves": 2,
                "ingredients": ["Pasta", ""],
                "steps": ["Boil water"],
                "rating": 0,
            }
        }
    )


class RecipeListResponse(BaseModel):
    """Response model for listing recipes."""
    recipes: List[Recipe] = Field(default_factory=list, description="Recipes in the order they were saved")
    count: int = Field(..., ge=0, description="Number of recipes")


class CoordinateOut(BaseModel):
    latitude: float
    longitude: float


class PlaceOut(BaseModel):
    """A grocery store search result."""
    id: str = Field(..., description="Result identifier (new for every search)")
    name: str = Field(..., description="Display name: explicit name, else address, else 'Unknown'")
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")
    address: Optional[str] = Field(None, description="Formatted address, if the provider has one")
    provider: str = Field(..., description="Search provider identifier")
    provider_id: Optional[str] = Field(None, description="Provider-specific identifier")
    distance: Optional[str] = Field(None, description="Distance label from the search centre (e.g. '0.4 mi away')")
    directions_url: str = Field(..., description="Driving directions URL")
    raw: Optional[Dict[str, Any]] = Field(None, description="Raw provider payload (if available)")


class PlaceSearchResponse(BaseModel):
    """Response model for the grocery store search endpoint."""
    query: str = Field(..., description="Query that was sent to the provider")
    center: CoordinateOut = Field(..., description="Centre of the search region")
    results: List[PlaceOut] = Field(default_factory=list)


class StatusOut(BaseModel):
    """A home screen status tile."""
    value: str = Field(..., description="Display name (e.g. 'Shopping')")
    description: str
    destination: str = Field(..., description="Screen the tile opens: create_recipe, map or detail")
