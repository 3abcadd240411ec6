"""
Backend API Client Module.

This module is the **single source of truth** for all backend API communication.
All HTTP calls to the FastAPI backend should go through functions in this module.

Key principles:
- Centralized error handling for network issues
- Graceful degradation when backend is unavailable
- Never let exceptions bubble up to crash the Streamlit app

# NOTE: BackendPlaceSearchConnector is the one exception to the last rule. It
    runs on a background search thread where Streamlit calls are not allowed,
    so it raises PlaceSearchError and LocalSearchService turns that into the
    inline error message.
"""

from typing import Any, Dict, List, Optional

import requests
import streamlit as st

from api.config import BackendConfig
from cookbook.connectors.base import BasePlaceSearchConnector
from cookbook.errors import PlaceSearchError
from cookbook.models import Coordinate, MapItem, Region


def get_backend_url() -> str:
    """
    Get the backend API base URL from environment variable or use default.

    Returns:
        Backend URL string with trailing slash removed. Defaults to http://localhost:8000.
    """
    return BackendConfig.get_backend_url()


def _describe_error(response: requests.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    return str(detail) if detail else response.text


@st.cache_data(ttl=60)  # Cache for 60 seconds to avoid hitting backend too frequently
def get_health_status() -> Optional[Dict[str, Any]]:
    """
    Check backend health status by calling /health endpoint.

    Returns:
        Dictionary with {"status": "ok", "raw": {...}} or None if backend is unreachable.
    """
    try:
        response = requests.get(f"{get_backend_url()}/health", timeout=5)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException:
        return None
    except ValueError:
        return None

    if data.get("status") == "ok":
        return {"status": "ok", "raw": data}
    return None


def list_recipes() -> Optional[List[Dict[str, Any]]]:
    """
    Fetch all saved recipes.

    Returns:
        List of recipe dictionaries (id, title, est_time, serves, ingredients, steps, rating),
        or None on error.
    """
    try:
        response = requests.get(f"{get_backend_url()}/recipes", timeout=10)
        response.raise_for_status()
        return response.json().get("recipes", [])
    except requests.exceptions.Timeout:
        st.error("Request timed out. The backend may be slow or unreachable.")
        return None
    except requests.exceptions.ConnectionError:
        st.error("Could not connect to backend. Please check that the backend is running.")
        return None
    except requests.exceptions.RequestException as e:
        st.error(f"An error occurred while loading recipes: {str(e)}")
        return None


def create_recipe(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Save a recipe via POST /recipes.

    Args:
        payload: Dictionary with title, est_time, serves, ingredients, steps, rating

    Returns:
        The saved recipe dictionary (including its id), or None on error.
    """
    try:
        response = requests.post(f"{get_backend_url()}/recipes", json=payload, timeout=10)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.Timeout:
        st.error("Request timed out. The backend may be slow or unreachable.")
        return None
    except requests.exceptions.ConnectionError:
        st.error("Could not connect to backend. Please check that the backend is running.")
        return None
    except requests.exceptions.HTTPError as e:
        st.error(f"Backend returned an error: {e.response.status_code} - {_describe_error(e.response)}")
        return None
    except requests.exceptions.RequestException as e:
        st.error(f"An error occurred while saving the recipe: {str(e)}")
        return None


class BackendPlaceSearchConnector(BasePlaceSearchConnector):
    """
    Place search connector that goes through the backend's /places/search endpoint.

    The backend only accepts a centre coordinate; it always searches the
    standard grocery store region around it, so `query` is not forwarded.
    """
    provider = "backend"

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30.0) -> None:
        self.base_url = (base_url or get_backend_url()).rstrip("/")
        self.timeout = timeout

    def search(self, query: str, region: Region, limit: int = 20) -> List[MapItem]:
        params = {
            "lat": region.center.latitude,
            "lon": region.center.longitude,
            "limit": limit,
        }
        try:
            response = requests.get(f"{self.base_url}/places/search", params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise PlaceSearchError("The grocery store search timed out.") from e
        except requests.exceptions.ConnectionError as e:
            raise PlaceSearchError("Could not connect to backend. Please check that the backend is running.") from e
        except requests.exceptions.HTTPError as e:
            raise PlaceSearchError(_describe_error(e.response)) from e
        except requests.exceptions.RequestException as e:
            raise PlaceSearchError(str(e)) from e
        except ValueError as e:
            raise PlaceSearchError("The backend returned an invalid response.") from e

        return [
            MapItem(
                # Already the resolved display name, so precedence is preserved
                name=result.get("name") or None,
                formatted_address=result.get("address"),
                coordinate=Coordinate(latitude=result["latitude"], longitude=result["longitude"]),
                provider=result.get("provider", self.provider),
                provider_id=result.get("provider_id"),
                raw=result.get("raw"),
            )
            for result in data.get("results", [])
        ]
