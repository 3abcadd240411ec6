"""
UI Styling and Components Module.

This module provides global CSS styling and reusable UI components
for the CookingBTB Streamlit app.
"""

from ui.styles import load_global_styles
from ui.layout import page_header, section, status_tile

__all__ = [
    "load_global_styles",
    "page_header",
    "section",
    "status_tile",
]
