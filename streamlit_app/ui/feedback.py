"""
Inline feedback for the CookingBTB pages.

Location and search failures are shown in place, next to the thing that failed,
as a single readable message. Nothing here raises or navigates.
"""

from contextlib import contextmanager
from typing import Optional

import streamlit as st

from cookbook.models import AuthorizationStatus

# Message shown when location access has been refused, keyed by status
_REFUSED_MESSAGES = {
    AuthorizationStatus.DENIED: "Location access is turned off for CookingBTB.",
    AuthorizationStatus.RESTRICTED: "Location access is restricted on this device.",
}


def show_error(message: str) -> None:
    """
    Show a failure message inline.

    Args:
        message: What went wrong, as reported by the location or search layer
    """
    st.error(f"Error: {message}")


def show_empty_state(title: str, subtitle: Optional[str] = None) -> None:
    st.info(f"**{title}**")
    if subtitle:
        st.caption(subtitle)


def show_location_refused(status: AuthorizationStatus) -> None:
    """Explain why there is no position when access was denied or restricted."""
    st.warning(_REFUSED_MESSAGES.get(status, "Location access is not available."))
    st.caption("Change it in Settings to see grocery stores near you.")


@contextmanager
def working_spinner(label: str):
    """Spinner shown while the page blocks on background work."""
    with st.spinner(label):
        yield
