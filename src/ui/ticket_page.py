"""Ticket display: attendee card, persona, welcome message and QR code."""
from html import escape

import streamlit as st

from src.config import Settings
from src.models.attendee import Attendee
from src.services import ticket_codec
from src.services.persona_service import generate_welcome
from src.services.registry import Registry
from src.ui.html_utils import html_block, ticket_gradient
from src.ui.navigation import TICKET_KEY, View, navigate_to

WELCOME_CACHE_KEY = "ticket_welcome_messages"


def _welcome_message(attendee: Attendee, settings: Settings) -> str:
    """Generate the welcome line once per attendee per session."""
    cache = st.session_state.setdefault(WELCOME_CACHE_KEY, {})
    if attendee.id not in cache:
        cache[attendee.id] = generate_welcome(attendee.full_name, attendee.ai_persona or "", settings=settings)
    return cache[attendee.id]


def _render_ticket_card(attendee: Attendee) -> str:
    persona_block = ""
    if attendee.ai_persona:
        persona_block = f"""
            <div style="margin-top: 14px; padding: 10px 14px; border-radius: 10px; background: #0f172a;">
                <div style="color: #a5b4fc; font-size: 0.7rem; text-transform: uppercase;">AI Persona</div>
                <div style="color: #f8fafc; font-weight: 700;">{escape(attendee.ai_persona)}</div>
            </div>
        """
    return html_block(f"""
        <div style="border-radius: 18px; overflow: hidden; background: #1e293b; max-width: 420px; margin: 0 auto;">
            <div style="background: {ticket_gradient(attendee.ticket_type)}; padding: 22px;">
                <div style="color: #ffffffcc; font-size: 0.75rem; text-transform: uppercase;">
                    {escape(attendee.ticket_type.label)}
                </div>
                <div style="color: #ffffff; font-size: 1.6rem; font-weight: 800;">{escape(attendee.full_name)}</div>
                <div style="color: #ffffffdd;">{escape(attendee.role)}</div>
            </div>
            <div style="padding: 18px 22px;">
                <div style="color: #94a3b8; font-size: 0.75rem;">TICKET ID</div>
                <div style="color: #f8fafc; font-family: monospace; font-size: 1.3rem;">{escape(attendee.id)}</div>
                {persona_block}
            </div>
        </div>
    """)


def render_ticket_page(registry: Registry, settings: Settings) -> None:
    """Render the ticket for the attendee registered in this session."""
    attendee = registry.get(st.session_state.get(TICKET_KEY, ""))
    if attendee is None:
        st.error("No ticket to display")
        if st.button("Back to home", key="ticket_missing_back"):
            navigate_to(View.LANDING)
            st.rerun()
        return

    if attendee.ai_persona:
        st.info(f"✨ {_welcome_message(attendee, settings)}")

    st.markdown(_render_ticket_card(attendee), unsafe_allow_html=True)

    payload = ticket_codec.encode(attendee, settings.event_name)
    qr_png = ticket_codec.render_qr_png(payload)

    _, qr_col, _ = st.columns([1, 1, 1])
    with qr_col:
        st.image(qr_png, caption="Present this code at the gate", use_container_width=True)

    download_col, share_col, back_col = st.columns(3, gap="small")
    with download_col:
        st.download_button(
            "⬇️ Download QR",
            data=qr_png,
            file_name=f"ticket_{attendee.id}.png",
            mime="image/png",
            use_container_width=True,
        )
    with share_col:
        st.link_button(
            "💬 Share via WhatsApp",
            ticket_codec.whatsapp_share_url(attendee, settings.event_name),
            use_container_width=True,
        )
    with back_col:
        if st.button("🏠 Done", use_container_width=True, key="ticket_done"):
            navigate_to(View.LANDING)
            st.rerun()
