"""Registration form UI."""
import logging

import streamlit as st

from src.models.attendee import TicketType
from src.services.registry import Registry
from src.ui.navigation import TICKET_KEY, View, navigate_to
from src.utils.exceptions import StorageError, ValidationError
from src.utils.validation import validate_registration

logger = logging.getLogger(__name__)


def render_registration_page(registry: Registry) -> None:
    """Render the attendee registration form and hand off to the ticket view."""
    st.markdown("## Secure Your Spot")
    st.caption("Join the event of the century.")

    with st.form("registration_form", clear_on_submit=False):
        full_name = st.text_input("Full Name", placeholder="Jane Doe", max_chars=100)
        email = st.text_input("Email Address", placeholder="jane@example.com")
        role = st.text_input("Job Role / Title", placeholder="Frontend Engineer")
        ticket_type = st.selectbox(
            "Ticket Type",
            options=list(TicketType),
            format_func=lambda t: t.label,
        )

        submit_col, cancel_col = st.columns(2, gap="small")
        with submit_col:
            submit = st.form_submit_button("✨ Generate Ticket", type="primary", use_container_width=True)
        with cancel_col:
            cancel = st.form_submit_button("Cancel", use_container_width=True)

    if cancel:
        navigate_to(View.LANDING)
        st.rerun()

    if not submit:
        return

    is_valid, error_msg = validate_registration(full_name, email, role, ticket_type)
    if not is_valid:
        st.error(f"❌ {error_msg}")
        return

    try:
        with st.spinner("Generating identity..."):
            attendee = registry.register(full_name, email, role, ticket_type)
    except ValidationError as error:
        st.error(f"❌ {error}")
        return
    except StorageError:
        logger.exception("Registration could not be saved")
        st.error("❌ Registration could not be saved, please try again")
        return

    st.session_state[TICKET_KEY] = attendee.id
    navigate_to(View.TICKET)
    st.rerun()
