"""View state for the Streamlit frontends."""
from enum import Enum
from typing import Dict, FrozenSet

import streamlit as st


class View(str, Enum):
    LANDING = "landing"
    REGISTER = "register"
    TICKET = "ticket"
    ADMIN = "admin"


TRANSITIONS: Dict[View, FrozenSet[View]] = {
    View.LANDING: frozenset({View.REGISTER, View.ADMIN}),
    View.REGISTER: frozenset({View.TICKET, View.LANDING}),
    View.TICKET: frozenset({View.LANDING}),
    View.ADMIN: frozenset({View.LANDING}),
}

VIEW_KEY = "current_view"
TICKET_KEY = "current_ticket_id"


def can_transition(current: View, target: View) -> bool:
    """Every view may return to the landing page; other moves follow TRANSITIONS."""
    return target is View.LANDING or current is target or target in TRANSITIONS[current]


def transition(current: View, target: View, has_ticket: bool = True) -> View:
    """
    Resolve the next view.

    Args:
        current: View being shown
        target: Requested view
        has_ticket: Whether a ticket is available to display

    Returns:
        The view to show; TICKET without a ticket falls back to LANDING

    Raises:
        ValueError: If the move is not in the transition table
    """
    current, target = View(current), View(target)
    if not can_transition(current, target):
        raise ValueError(f"Cannot navigate from {current.value} to {target.value}")
    if target is View.TICKET and not has_ticket:
        return View.LANDING
    return target


def current_view() -> View:
    return View(st.session_state.get(VIEW_KEY, View.LANDING.value))


def navigate_to(target: View) -> None:
    """Move the session to another view, enforcing the transition table."""
    has_ticket = bool(st.session_state.get(TICKET_KEY))
    st.session_state[VIEW_KEY] = transition(current_view(), target, has_ticket).value
