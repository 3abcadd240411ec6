"""
Configuration management for CookingBTB.

This module centralizes environment variable loading from the .env file at the
project root. It should be imported early in both the backend (api/main.py) and
the frontend (streamlit_app/app.py) so .env is loaded before any other code
reads environment variables.

In production .env usually does not exist; load_dotenv() is safe to call and
will no-op, and platform environment variables are used instead.

Environment Variables:
- LOCATION_PROVIDER: Optional, "ip" (default) or "static"
- LOCATION_SERVICE_URL: Optional, defaults to "http://ip-api.com/json/"
- LOCATION_TIMEOUT_SECONDS: Optional, defaults to 10
- LOCATION_FALLBACK_LATITUDE / LOCATION_FALLBACK_LONGITUDE: Optional, initial map
  centre and the static provider's position (default 37.3349, -122.0090)
- LOCATION_ACCESS: Optional, "restricted" to model a managed device that can
  never grant location access
- NOMINATIM_URL: Optional, defaults to "https://nominatim.openstreetmap.org/search"
- NOMINATIM_USER_AGENT: Recommended, identifying User-Agent for Nominatim
- NOMINATIM_TIMEOUT_SECONDS: Optional, defaults to 15
- PLACE_SEARCH_LIMIT: Optional, maximum results per search (default 20)
- BACKEND_URL: Optional, backend URL (defaults to http://localhost:8000)
- LOG_LEVEL: Optional, defaults to "INFO"
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from cookbook.connectors.nominatim_connector import (
    DEFAULT_NOMINATIM_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from cookbook.location import (
    DEFAULT_LATITUDE,
    DEFAULT_LOCATION_SERVICE_URL,
    DEFAULT_LOCATION_TIMEOUT_SECONDS,
    DEFAULT_LONGITUDE,
)
from cookbook.models import AuthorizationStatus
from cookbook.search import DEFAULT_RESULT_LIMIT

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_LOGGING_CONFIGURED = False


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    Safe to call multiple times. Existing environment variables take precedence
    over values in .env (override=False).
    """
    # api/config.py -> api/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once for the process.

    Args:
        level: Log level name (optional, reads LOG_LEVEL env var, default "INFO")
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    _LOGGING_CONFIGURED = True


class LocationConfig:
    """Configuration for the location provider."""

    @staticmethod
    def get_provider_kind() -> str:
        """
        Get the location provider kind.

        Returns:
            "ip" (default) or "static"
        """
        return os.getenv("LOCATION_PROVIDER", "ip").lower()

    @staticmethod
    def get_service_url() -> str:
        return os.getenv("LOCATION_SERVICE_URL", DEFAULT_LOCATION_SERVICE_URL)

    @staticmethod
    def get_timeout() -> float:
        return float(os.getenv("LOCATION_TIMEOUT_SECONDS", DEFAULT_LOCATION_TIMEOUT_SECONDS))

    @staticmethod
    def get_fallback_latitude() -> float:
        return float(os.getenv("LOCATION_FALLBACK_LATITUDE", DEFAULT_LATITUDE))

    @staticmethod
    def get_fallback_longitude() -> float:
        return float(os.getenv("LOCATION_FALLBACK_LONGITUDE", DEFAULT_LONGITUDE))

    @staticmethod
    def get_initial_status() -> AuthorizationStatus:
        """
        Get the authorization status a new location provider starts in.

        Returns:
            RESTRICTED if LOCATION_ACCESS=restricted, otherwise NOT_DETERMINED
        """
        if os.getenv("LOCATION_ACCESS", "").strip().lower() == AuthorizationStatus.RESTRICTED.value:
            return AuthorizationStatus.RESTRICTED
        return AuthorizationStatus.NOT_DETERMINED


class PlaceSearchConfig:
    """Configuration for the Nominatim place search connector."""

    @staticmethod
    def get_url() -> str:
        return os.getenv("NOMINATIM_URL", DEFAULT_NOMINATIM_URL)

    @staticmethod
    def get_user_agent() -> str:
        return os.getenv("NOMINATIM_USER_AGENT", DEFAULT_USER_AGENT)

    @staticmethod
    def get_timeout() -> float:
        return float(os.getenv("NOMINATIM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))

    @staticmethod
    def get_result_limit() -> int:
        return int(os.getenv("PLACE_SEARCH_LIMIT", DEFAULT_RESULT_LIMIT))


class BackendConfig:
    """Configuration shared by the Streamlit frontend for reaching the API."""

    @staticmethod
    def get_backend_url() -> str:
        """
        Get the backend API base URL.

        Returns:
            BACKEND_URL with trailing slash removed (default: http://localhost:8000)
        """
        return os.getenv("BACKEND_URL", "http://localhost:8000").rstrip("/")


def get_config_summary() -> dict:
    """
    Get a non-secret summary of the active configuration (for the /health endpoint).

    Returns:
        Dictionary with location provider kind, place search URL and whether a
        custom Nominatim User-Agent is set
    """
    return {
        "location_provider": LocationConfig.get_provider_kind(),
        "place_search_url": PlaceSearchConfig.get_url(),
        "custom_user_agent": os.getenv("NOMINATIM_USER_AGENT") is not None,
    }
