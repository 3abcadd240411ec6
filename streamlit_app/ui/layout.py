"""
Layout primitives for consistent page structure.

Provides reusable components for page headers, sections and status tiles.
"""

from html import escape
from typing import Optional

import streamlit as st

from cookbook.status import Status


def page_header(title: str, subtitle: Optional[str] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
    """
    st.markdown('<div class="cbtb-page-header">', unsafe_allow_html=True)
    st.markdown(f"# {title}")
    if subtitle:
        st.markdown(f'<div class="subtitle">{escape(subtitle)}</div>', unsafe_allow_html=True)
    st.markdown('</div>', unsafe_allow_html=True)


def section(title: str, caption: Optional[str] = None) -> None:
    """
    Render a section header with optional caption.

    Args:
        title: Section title
        caption: Optional caption/help text below title
    """
    st.markdown(f"#### {title}")
    if caption:
        st.caption(caption)


def status_tile(status: Status) -> bool:
    """
    Render a status tile with an "Open" button underneath.

    Args:
        status: Status to render

    Returns:
        True if the tile's button was clicked on this run
    """
    st.markdown(
        f'<div class="cbtb-tile">'
        f'<div class="cbtb-tile-title">{escape(status.value)}</div>'
        f'<div class="cbtb-tile-description">{escape(status.description)}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )
    return st.button(f"Open {status.value}", key=f"status_tile_{status.name}", use_container_width=True)


def stars(rating: int, out_of: int = 5) -> str:
    """Star string for a rating, e.g. ★★★☆☆."""
    return "★" * rating + "☆" * (out_of - rating)
