"""Gate admin dashboard: check-in panel, live analytics and attendee table."""
import hashlib
import logging
import time
from typing import Optional

import streamlit as st

from src.models.attendee import CheckInStatus
from src.models.check_in import CheckInOutcome, CheckInResult, CheckInSource
from src.services.admin_service import (
    admin_login_required,
    is_admin_authenticated,
    login_admin,
    logout_admin,
)
from src.services.analytics_service import attendee_rows, recent_check_ins, summarize
from src.services.check_in_service import check_in_from_image, process_check_in
from src.services.registry import Registry
from src.ui.html_utils import activity_row, status_banner
from src.ui.navigation import View, navigate_to
from src.utils.date_utils import format_clock_time
from src.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

BANNER_SECONDS = 3.0
FEEDBACK_KEY = "gate_feedback"
SCAN_DIGEST_KEY = "gate_last_scan_digest"
STATUS_FILTERS = {
    "All": None,
    "Registered": CheckInStatus.REGISTERED,
    "Checked In": CheckInStatus.CHECKED_IN,
}


def feedback_kind(result: CheckInResult) -> str:
    if result.success:
        return "success"
    if result.outcome is CheckInOutcome.ALREADY_CHECKED_IN:
        return "info"
    return "error"


def _set_feedback(kind: str, text: str) -> None:
    st.session_state[FEEDBACK_KEY] = {"kind": kind, "text": text, "at": time.time()}


def active_feedback(now: Optional[float] = None) -> Optional[dict]:
    """Return the current banner, or None once it is older than BANNER_SECONDS."""
    feedback = st.session_state.get(FEEDBACK_KEY)
    if not feedback:
        return None
    now = time.time() if now is None else now
    if now - feedback["at"] > BANNER_SECONDS:
        del st.session_state[FEEDBACK_KEY]
        return None
    return feedback


def _record_result(result: CheckInResult) -> None:
    text = result.message
    if result.outcome is CheckInOutcome.ALREADY_CHECKED_IN and result.attendee is not None:
        text = f"{text} (at {format_clock_time(result.attendee.check_in_time)})"
    _set_feedback(feedback_kind(result), text)


def _run_check_in(action, *args) -> None:
    try:
        result = action(*args)
    except StorageError:
        logger.exception("Check-in failed due to storage error")
        _set_feedback("error", "Check-in could not be recorded, please retry")
        return
    if result is None:
        _set_feedback("error", "No QR code found in the image")
        return
    _record_result(result)


def render_login_page() -> None:
    """Render the gate staff login form."""
    st.markdown("## 🔐 Gate Staff Login")

    with st.form("admin_login_form", clear_on_submit=False):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")

        submit_col, cancel_col = st.columns(2, gap="small")
        with submit_col:
            submit = st.form_submit_button("Log in", type="primary", use_container_width=True)
        with cancel_col:
            cancel = st.form_submit_button("Back", use_container_width=True)

        if submit:
            if not username or not password:
                st.error("❌ Enter username and password")
            else:
                success, message = login_admin(username, password)
                if success:
                    st.rerun()
                else:
                    st.error(f"❌ {message}")

    if cancel:
        navigate_to(View.LANDING)
        st.rerun()


def _render_check_in_panel(registry: Registry) -> None:
    st.markdown("### ✅ Quick Check-In")

    manual_tab, camera_tab = st.tabs(["⌨️ Ticket ID", "📷 Scan QR"])

    with manual_tab:
        with st.form("manual_check_in_form", clear_on_submit=True):
            ticket_id = st.text_input("Ticket ID", placeholder="ABC123XYZ")
            submitted = st.form_submit_button("Check Attendee In", type="primary", use_container_width=True)
        if submitted and ticket_id.strip():
            _run_check_in(process_check_in, registry, ticket_id, CheckInSource.MANUAL)

    with camera_tab:
        snapshot = st.camera_input("Point the camera at the ticket QR code", key="gate_camera")
        if snapshot is not None:
            image_bytes = snapshot.getvalue()
            digest = hashlib.sha256(image_bytes).hexdigest()
            # camera_input keeps returning the last photo on every rerun
            if st.session_state.get(SCAN_DIGEST_KEY) != digest:
                st.session_state[SCAN_DIGEST_KEY] = digest
                _run_check_in(check_in_from_image, registry, image_bytes)

    feedback = active_feedback()
    if feedback:
        st.markdown(status_banner(feedback["kind"], feedback["text"]), unsafe_allow_html=True)


def _render_analytics(attendees) -> None:
    stats = summarize(attendees)

    st.markdown("### 📊 Live Analytics")
    total_col, in_col, left_col = st.columns(3, gap="small")
    total_col.metric("Registered", stats.total)
    in_col.metric("Checked In", stats.checked_in)
    left_col.metric("Still Expected", stats.remaining)

    st.caption(f"Capacity {stats.checked_in} / {stats.total}")
    st.progress(min(stats.percentage / 100.0, 1.0))

    if stats.by_ticket_type:
        st.markdown("#### Ticket Distribution")
        st.bar_chart(stats.by_ticket_type)

    st.markdown("#### 👥 Recent Activity")
    recent = recent_check_ins(attendees, limit=5)
    if not recent:
        st.caption("Waiting for first arrival...")
    for attendee in recent:
        st.markdown(
            activity_row(attendee.full_name, attendee.id, format_clock_time(attendee.check_in_time)),
            unsafe_allow_html=True,
        )


def _render_attendee_table(registry: Registry) -> None:
    st.markdown("### 🗂️ Attendees")
    label = st.radio("Show", options=list(STATUS_FILTERS), horizontal=True, key="gate_status_filter")
    rows = attendee_rows(registry.list(STATUS_FILTERS[label]))
    if not rows:
        st.caption("No attendees yet.")
        return
    st.dataframe(rows, use_container_width=True, hide_index=True)


def render_gate_admin(registry: Registry) -> None:
    """Render the gate dashboard, behind a login when ADMIN_PASSWORD is set."""
    if admin_login_required() and not is_admin_authenticated():
        render_login_page()
        return

    header_col, exit_col, logout_col = st.columns([4, 1, 1], gap="small")
    with header_col:
        st.markdown("## Gate Control")
        st.caption("Real-time check-in and analytics")
    with exit_col:
        if st.button("Exit Dashboard", use_container_width=True, key="gate_exit"):
            navigate_to(View.LANDING)
            st.rerun()
    with logout_col:
        if admin_login_required() and st.button("Log out", use_container_width=True, key="gate_logout"):
            logout_admin()
            navigate_to(View.LANDING)
            st.rerun()

    check_in_col, analytics_col = st.columns([1, 1.3], gap="large")
    with check_in_col:
        _render_check_in_panel(registry)

    # Read after any check-in above so the panels show current truth
    try:
        attendees = registry.list()
    except StorageError as error:
        logger.exception("Cannot load attendees")
        st.error(f"❌ Cannot load attendees: {error}")
        return

    with analytics_col:
        _render_analytics(attendees)

    _render_attendee_table(registry)
