"""
Session management utilities for Streamlit pages.

This module keeps the per-browser-session objects in st.session_state so they
survive reruns and page navigation:

- the selected Status (set by the home screen tiles)
- the LocationManager (and its provider)
- the LocalSearchService for the Shopping page
- the RecipeDraft behind the recipe form

Refreshing the page or opening a new tab starts a fresh session.
"""

from typing import Dict

import streamlit as st

from api.config import LocationConfig, PlaceSearchConfig
from cookbook.location import LocationManager, get_location_provider
from cookbook.models import AuthorizationStatus
from cookbook.recipes import RecipeDraft
from cookbook.search import LocalSearchService
from cookbook.status import Screen, Status
from utils.api_client import BackendPlaceSearchConnector

SELECTION_KEY = "selection"
LOCATION_MANAGER_KEY = "location_manager"
SEARCH_SERVICE_KEY = "search_service"
RECIPE_DRAFT_KEY = "recipe_draft"
CURRENT_PAGE_KEY = "current_page"
OPEN_SETTINGS_KEY = "open_settings_requested"
SETTINGS_REDIRECTED_FOR_KEY = "settings_redirected_for"

HOME_PAGE = "app.py"
SETTINGS_PAGE = "pages/04_⚙️_Settings.py"

# Detail page for each destination screen
PAGE_FOR_SCREEN: Dict[Screen, str] = {
    Screen.CREATE_RECIPE: "pages/01_🥘_New_Recipe.py",
    Screen.MAP: "pages/02_🛒_Shopping.py",
    Screen.DETAIL: "pages/03_🍳_Status.py",
}


def get_selection() -> Status:
    """Currently selected status (defaults to "New recipe")."""
    if SELECTION_KEY not in st.session_state:
        st.session_state[SELECTION_KEY] = Status.PROGRESS
    return st.session_state[SELECTION_KEY]


def select_status(status: Status) -> str:
    """
    Record the tapped status and return the page it navigates to.

    Returns:
        Page path for st.switch_page()
    """
    st.session_state[SELECTION_KEY] = status
    return PAGE_FOR_SCREEN[status.destination]


def did_appear(page_key: str) -> bool:
    """
    Whether this run is the first one since the user navigated to `page_key`.

    Streamlit reruns a page on every interaction; this tells an "on appear"
    action apart from an ordinary rerun.
    """
    appeared = st.session_state.get(CURRENT_PAGE_KEY) != page_key
    st.session_state[CURRENT_PAGE_KEY] = page_key
    return appeared


def _request_settings() -> None:
    # switch_page is not allowed inside widget callbacks, so pages check this flag
    st.session_state[OPEN_SETTINGS_KEY] = True


def consume_settings_request() -> bool:
    """Return True (once) if the location manager asked to open settings."""
    return bool(st.session_state.pop(OPEN_SETTINGS_KEY, False))


def should_auto_open_settings(status: AuthorizationStatus) -> bool:
    """
    Whether appearing with `status` should send the user to Settings.

    A refused status redirects once; coming back from Settings with the same
    status shows the page instead. Any other status clears the record.
    """
    if status not in (AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED):
        st.session_state.pop(SETTINGS_REDIRECTED_FOR_KEY, None)
        return False
    if st.session_state.get(SETTINGS_REDIRECTED_FOR_KEY) == status:
        return False
    st.session_state[SETTINGS_REDIRECTED_FOR_KEY] = status
    return True


def get_location_manager() -> LocationManager:
    """Get or create the session's LocationManager."""
    if LOCATION_MANAGER_KEY not in st.session_state:
        kind = LocationConfig.get_provider_kind()
        kwargs = {"status": LocationConfig.get_initial_status()}
        if kind == "ip":
            kwargs.update(service_url=LocationConfig.get_service_url(), timeout=LocationConfig.get_timeout())
        else:
            kwargs.update(
                latitude=LocationConfig.get_fallback_latitude(),
                longitude=LocationConfig.get_fallback_longitude(),
            )
        provider = get_location_provider(kind, **kwargs)
        st.session_state[LOCATION_MANAGER_KEY] = LocationManager(provider, settings_opener=_request_settings)
    return st.session_state[LOCATION_MANAGER_KEY]


def get_search_service() -> LocalSearchService:
    """Get or create the session's grocery store search service."""
    if SEARCH_SERVICE_KEY not in st.session_state:
        st.session_state[SEARCH_SERVICE_KEY] = LocalSearchService(
            BackendPlaceSearchConnector(),
            limit=PlaceSearchConfig.get_result_limit(),
        )
    return st.session_state[SEARCH_SERVICE_KEY]


def get_recipe_draft() -> RecipeDraft:
    """Get or create the recipe form's draft."""
    if RECIPE_DRAFT_KEY not in st.session_state:
        st.session_state[RECIPE_DRAFT_KEY] = RecipeDraft()
    return st.session_state[RECIPE_DRAFT_KEY]


def reset_recipe_draft() -> RecipeDraft:
    """Throw away the current draft and start a blank one."""
    st.session_state[RECIPE_DRAFT_KEY] = RecipeDraft()
    return st.session_state[RECIPE_DRAFT_KEY]
