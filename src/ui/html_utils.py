"""Helpers for preparing HTML snippets before rendering in Streamlit."""
from html import escape
from textwrap import dedent

from src.models.attendee import TicketType

TICKET_GRADIENTS = {
    TicketType.GENERAL: "linear-gradient(135deg, #6366f1 0%, #a855f7 100%)",
    TicketType.VIP: "linear-gradient(135deg, #f59e0b 0%, #dc2626 100%)",
    TicketType.SPEAKER: "linear-gradient(135deg, #06b6d4 0%, #2563eb 100%)",
    TicketType.PRESS: "linear-gradient(135deg, #10b981 0%, #0d9488 100%)",
}

BANNER_COLORS = {
    "success": ("#10b98120", "#10b981", "#6ee7b7"),
    "error": ("#ef444420", "#ef4444", "#fca5a5"),
    "info": ("#3b82f620", "#3b82f6", "#93c5fd"),
}


def html_block(template: str) -> str:
    """
    Normalize multi-line HTML so Streamlit doesn't treat it as Markdown code.

    Streamlit's Markdown renderer interprets lines with >=4 leading spaces as
    code blocks, so every line is left-stripped.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def ticket_gradient(ticket_type: TicketType) -> str:
    return TICKET_GRADIENTS.get(TicketType.parse(ticket_type), TICKET_GRADIENTS[TicketType.GENERAL])


def status_banner(kind: str, text: str) -> str:
    """Coloured banner for check-in feedback; unknown kinds render as info."""
    background, border, color = BANNER_COLORS.get(kind, BANNER_COLORS["info"])
    return html_block(f"""
        <div style="background: {background}; border: 1px solid {border}; color: {color};
                    border-radius: 10px; padding: 14px; text-align: center; font-weight: 600;">
            {escape(text)}
        </div>
    """)


def activity_row(name: str, detail: str, clock: str) -> str:
    """One line of the recent activity list; user text is escaped."""
    return html_block(f"""
        <div style="display: flex; justify-content: space-between; align-items: center;
                    background: #1e293b; border-radius: 8px; padding: 10px 12px; margin-bottom: 6px;">
            <div>
                <div style="color: #f8fafc; font-weight: 600; font-size: 0.9rem;">{escape(name)}</div>
                <div style="color: #818cf8; font-size: 0.75rem; font-family: monospace;">{escape(detail)}</div>
            </div>
            <div style="display: flex; gap: 8px; align-items: center;">
                <span style="color: #64748b; font-size: 0.75rem;">{escape(clock)}</span>
                <span style="color: #34d399; background: #10b98120; padding: 2px 8px; border-radius: 4px;
                             font-size: 0.75rem;">In</span>
            </div>
        </div>
    """)
