"""
FastAPI application for the CookingBTB API.

This module defines the REST API endpoints for the CookingBTB backend:
- GET /recipes: List saved recipes
- POST /recipes: Save a new recipe
- GET /recipes/{recipe_id}: Get a single recipe
- GET /statuses: List the home screen statuses
- GET /places/search: Search for grocery stores near a coordinate
- GET /health: Health check

Recipes live in the process-wide in-memory RecipeStore and are lost when the
backend restarts.

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging
import time
from typing import List

from fastapi import FastAPI, HTTPException, status

from api.config import configure_logging, get_config_summary
from api.routers import places
from api.schemas import RecipeCreate, RecipeListResponse, StatusOut
from cookbook.errors import RecipeFormError
from cookbook.models import Recipe
from cookbook.recipes import RecipeDraft, RecipeStore
from cookbook.status import all_statuses

configure_logging()
logger = logging.getLogger(__name__)

# Track app start time for uptime calculation
_APP_START_TIME = time.time()

APP_NAME = "CookingBTB API"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Backend API for recording recipes and finding nearby grocery stores"

app = FastAPI(
    title=APP_NAME,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    openapi_tags=[
        {"name": "recipes", "description": "Save and list recipes (in-memory, process lifetime)."},
        {"name": "places", "description": "Search for grocery stores near a coordinate."},
        {"name": "statuses", "description": "Home screen status tiles."},
        {"name": "health", "description": "Health check and monitoring endpoints."},
    ],
)

app.include_router(places.router)


@app.get(
    "/recipes",
    response_model=RecipeListResponse,
    tags=["recipes"],
    summary="List saved recipes",
)
def list_recipes() -> RecipeListResponse:
    recipes = RecipeStore.shared().all()
    return RecipeListResponse(recipes=recipes, count=len(recipes))


@app.post(
    "/recipes",
    response_model=Recipe,
    status_code=status.HTTP_201_CREATED,
    tags=["recipes"],
    summary="Save a new recipe",
    description="Blank ingredient and step lines are dropped and all text is trimmed. The request is "
                "rejected with 422 if the title, every ingredient, or every step is blank.",
)
def create_recipe(payload: RecipeCreate) -> Recipe:
    """
    Save a recipe from the recipe form.

    Args:
        payload: RecipeCreate model with the form's fields

    Returns:
        The saved Recipe, including its generated id

    Raises:
        HTTPException 422: If title, ingredients or steps are blank

    Example:
        ```bash
        POST /recipes
        Body: {"title": "Pasta", "ingredients": ["Pasta"], "steps": ["Boil water"], "rating": 0}
        ```
    """
    draft = RecipeDraft(
        title=payload.title,
        est_time=payload.est_time,
        serves=payload.serves,
        ingredients=payload.ingredients,
        steps=payload.steps,
        rating=payload.rating,
    )
    try:
        return draft.save(RecipeStore.shared())
    except RecipeFormError as e:
        logger.info("Rejected recipe %r: %s", payload.title, e)
        raise HTTPException(
            status_code=422,
            detail=str(e),
        ) from e


@app.get("/recipes/{recipe_id}", response_model=Recipe, tags=["recipes"], summary="Get a recipe by id")
def get_recipe(recipe_id: str) -> Recipe:
    recipe = RecipeStore.shared().get(recipe_id)
    if recipe is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipe not found: {recipe_id}",
        )
    return recipe


@app.get("/statuses", response_model=List[StatusOut], tags=["statuses"], summary="List home screen statuses")
def list_statuses() -> List[StatusOut]:
    return [
        StatusOut(value=s.value, description=s.description, destination=s.destination.value)
        for s in all_statuses()
    ]


@app.get("/health", tags=["health"])
def health():
    """
    Health check endpoint for monitoring and status checks.

    Returns:
        Dictionary with status, API metadata, uptime, recipe count and active configuration.
        Always returns 200 OK if the endpoint is reachable.
    """
    return {
        "status": "ok",
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
        "uptime_seconds": int(time.time() - _APP_START_TIME),
        "recipe_count": len(RecipeStore.shared()),
        "config": get_config_summary(),
    }


@app.get("/")
def root():
    """
    Root endpoint providing API information.

    Returns:
        Dictionary with API name and version
    """
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
        "docs": "/docs",
    }
