"""Gate staff authentication and session state management."""
import hmac
from typing import Tuple

import streamlit as st

from src.config import get_settings


def authenticate_admin(username: str, password: str) -> bool:
    """
    Authenticate gate staff credentials.

    Args:
        username: Admin username
        password: Admin password

    Returns:
        True if credentials valid, False otherwise

    Behavior:
        - Reads ADMIN_USERNAME / ADMIN_PASSWORD through get_settings()
        - An empty configured password never authenticates
    """
    settings = get_settings()
    if not settings.admin_password:
        return False

    username_ok = hmac.compare_digest(username or "", settings.admin_username)
    password_ok = hmac.compare_digest(password or "", settings.admin_password)
    return username_ok and password_ok


def admin_login_required() -> bool:
    """Gate dashboard is protected only when ADMIN_PASSWORD is configured."""
    return bool(get_settings().admin_password)


def is_admin_authenticated() -> bool:
    """
    Check if gate staff are logged in for the current Streamlit session.

    Returns:
        True if st.session_state['admin_authenticated'] is True
    """
    return st.session_state.get("admin_authenticated", False)


def login_admin(username: str, password: str) -> Tuple[bool, str]:
    """
    Log in gate staff.

    Returns:
        Tuple of (success: bool, message: str)
        - (True, "Logged in") on success
        - (False, "Invalid username or password") on failure
    """
    if authenticate_admin(username, password):
        st.session_state["admin_authenticated"] = True
        return True, "Logged in"
    return False, "Invalid username or password"


def logout_admin() -> None:
    """Clear the gate staff login from session state."""
    if "admin_authenticated" in st.session_state:
        del st.session_state["admin_authenticated"]
