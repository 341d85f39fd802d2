"""
Event gate application
Registration, tickets and door check-in
"""
import logging

import streamlit as st

from src.config import get_settings
from src.services.registry import Registry, build_registry
from src.ui.gate_admin import render_gate_admin
from src.ui.landing import render_landing
from src.ui.navigation import VIEW_KEY, View, current_view, navigate_to
from src.ui.registration_page import render_registration_page
from src.ui.ticket_page import render_ticket_page
from src.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


st.set_page_config(
    page_title="Event Gate",
    page_icon="🎟️",
    layout="wide",
    initial_sidebar_state="collapsed"
)


@st.cache_resource
def get_registry() -> Registry:
    """One Registry per server process, shared by every browser session."""
    settings = get_settings()
    setup_logging(settings.log_level)
    return build_registry(settings)


def initialize_session_state():
    """Initialize session state defaults."""
    if VIEW_KEY not in st.session_state:
        st.session_state[VIEW_KEY] = View.LANDING.value

    # Handle ?view=admin for door tablets
    if "url_params_processed" not in st.session_state:
        if st.query_params.get("view") == View.ADMIN.value:
            st.session_state[VIEW_KEY] = View.ADMIN.value
        st.session_state.url_params_processed = True


def apply_custom_css():
    """Apply custom CSS."""
    st.markdown("""
        <style>
        .stApp {
            background: radial-gradient(circle at 10% 0%, #1e1b4b 0%, #020617 55%);
        }

        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}
        header, [data-testid="stHeader"] {
            visibility: hidden;
            height: 0;
        }

        [data-testid="stAppViewContainer"] > .main .block-container {
            padding-top: 1.5rem;
        }

        .stButton > button, .stFormSubmitButton > button {
            border-radius: 12px;
            font-weight: 600;
        }

        .stButton > button[kind="primary"], .stFormSubmitButton > button[kind="primary"] {
            background: linear-gradient(135deg, #6366f1 0%, #a855f7 100%);
            border: none;
            color: white;
        }

        .stTextInput > div > div > input {
            background: #0f172a;
            border: 1px solid #334155;
            border-radius: 8px;
            color: #f1f5f9;
        }
        </style>
    """, unsafe_allow_html=True)


def render_navigation():
    """Render the top bar."""
    brand_col, _ = st.columns([1, 4])
    with brand_col:
        if st.button("🌌 EventHorizon", key="nav_home"):
            navigate_to(View.LANDING)
            st.rerun()


def render_current_page(registry: Registry):
    """Render the page for the current view."""
    settings = get_settings()
    view = current_view()

    try:
        if view is View.LANDING:
            render_landing(settings.event_name)

        elif view is View.REGISTER:
            render_registration_page(registry)

        elif view is View.TICKET:
            render_ticket_page(registry, settings)

        elif view is View.ADMIN:
            render_gate_admin(registry)

    except Exception as e:
        logger.exception("Unhandled exception while rendering %s", view.value)
        st.error("Something went wrong, please try again")

        with st.expander("🔍 Error details"):
            st.code(str(e))

        if st.button("Back to home"):
            navigate_to(View.LANDING)
            st.rerun()


def main():
    """Application entry point."""
    try:
        registry = get_registry()
        initialize_session_state()
        apply_custom_css()
        render_navigation()
        render_current_page(registry)
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("The application failed to start, please reload the page")
        st.code(str(e))

        if st.button("🔄 Reload"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
