"""Landing page with entry points for attendees and gate staff."""
from html import escape

import streamlit as st

from src.ui.html_utils import html_block
from src.ui.navigation import View, navigate_to


def render_landing(event_name: str) -> None:
    st.markdown(
        html_block(f"""
            <div style="text-align: center; padding: 60px 0 32px 0;">
                <div style="font-size: 3.6rem; font-weight: 800; letter-spacing: -0.02em;
                            background: linear-gradient(90deg, #ffffff, #c7d2fe, #818cf8);
                            -webkit-background-clip: text; -webkit-text-fill-color: transparent;">
                    {escape(event_name.upper())}
                </div>
                <p style="color: #94a3b8; font-size: 1.2rem;">
                    Experience the nexus of technology and imagination.
                </p>
            </div>
        """),
        unsafe_allow_html=True,
    )

    _, ticket_col, admin_col, _ = st.columns([1, 1, 1, 1], gap="small")
    with ticket_col:
        if st.button("🎟️ Get Ticket", use_container_width=True, type="primary", key="landing_get_ticket"):
            navigate_to(View.REGISTER)
            st.rerun()
    with admin_col:
        if st.button("🛂 Gate Admin", use_container_width=True, key="landing_gate_admin"):
            navigate_to(View.ADMIN)
            st.rerun()
