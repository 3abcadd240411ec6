"""
CookingBTB - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point. It shows the welcome screen
and, once the user taps to begin, the grid of status tiles. Tapping a tile
records the selected status and switches to its detail page.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import api.config and cookbook
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import streamlit as st

from api.config import configure_logging
from cookbook.status import all_statuses
from utils.api_client import get_health_status
from utils.session import did_appear, select_status
from ui.layout import status_tile
from ui.styles import load_global_styles

SHOW_PICKER_KEY = "show_picker"

configure_logging()

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="CookingBTB",
    page_icon="🍳",
    layout="centered",
    initial_sidebar_state="collapsed",
)

load_global_styles()
did_appear("home")

with st.sidebar:
    st.markdown("### 🍳 **CookingBTB**")
    st.divider()
    with st.expander("System status", expanded=False):
        backend_status = get_health_status()
        if backend_status:
            raw = backend_status.get("raw", {})
            st.markdown("**Backend:** 🟢")
            st.caption(f"{raw.get('recipe_count', 0)} recipe(s) saved")
        else:
            st.markdown("**Backend:** 🔴")
            st.caption("Start it with `uvicorn api.main:app --reload`.")

if not st.session_state.get(SHOW_PICKER_KEY, False):
    st.markdown(
        '<div class="cbtb-welcome"><h1>Welcome to CookingBTB!</h1></div>',
        unsafe_allow_html=True,
    )
    if st.button("Tap anywhere to begin", use_container_width=True, type="secondary"):
        st.session_state[SHOW_PICKER_KEY] = True
        st.rerun()
else:
    statuses = all_statuses()
    # Two tiles per row
    for row_start in range(0, len(statuses), 2):
        cols = st.columns(2)
        for col, status in zip(cols, statuses[row_start:row_start + 2]):
            with col:
                if status_tile(status):
                    st.switch_page(select_status(status))
