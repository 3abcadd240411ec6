"""
Global CSS Styling for CookingBTB.

This module provides load_global_styles() to inject consistent styling
across all pages: a blue-to-grey gradient background and frosted-glass
status tiles.
"""

import streamlit as st


def load_global_styles() -> None:
    """
    Inject global CSS styles for the CookingBTB app.

    This function:
    - Paints the app background with a diagonal blue-to-grey gradient
    - Styles status tiles as rounded, translucent cards with a soft shadow
    - Keeps the page header and welcome text centred and readable on the gradient
    """
    css = """
    <style>
        .stApp {
            background: linear-gradient(135deg, #1e5bd8 0%, #8e8e93 100%);
            background-attachment: fixed;
        }

        h1, h2, h3 {
            font-weight: 600 !important;
            letter-spacing: 0.02em !important;
        }

        /* Welcome screen */
        .cbtb-welcome {
            text-align: center;
            padding: 6rem 1rem 2rem 1rem;
            color: #ffffff;
        }

        /* Status tiles */
        .cbtb-tile {
            min-height: 150px;
            border-radius: 16px;
            padding: 16px;
            margin-bottom: 0.5rem;
            background: rgba(255, 255, 255, 0.18);
            backdrop-filter: blur(12px);
            border: 1px solid rgba(255, 255, 255, 0.35);
            box-shadow: 0 6px 20px rgba(0, 0, 0, 0.25);
            text-align: center;
            color: #ffffff;
        }

        .cbtb-tile-title {
            font-size: 1.8rem;
            font-weight: 700;
            margin-bottom: 0.5rem;
        }

        .cbtb-tile-description {
            font-size: 0.85rem;
            opacity: 0.9;
        }

        /* Page header */
        .cbtb-page-header .subtitle {
            opacity: 0.8;
            margin-bottom: 1rem;
        }

        /* Place list */
        .cbtb-place-name {
            font-weight: 600;
        }

        .cbtb-stars {
            font-size: 1.4rem;
            color: #f5c518;
        }
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)
