"""Tests for HTML snippet helpers."""
from src.models.attendee import TicketType
from src.ui.html_utils import TICKET_GRADIENTS, activity_row, html_block, status_banner, ticket_gradient


def test_html_block_strips_indentation():
    html = html_block("""
        <div>
            <span>hi</span>
        </div>
    """)

    assert html == "<div>\n<span>hi</span>\n</div>"


def test_ticket_gradient_accepts_strings():
    assert ticket_gradient("VIP") == TICKET_GRADIENTS[TicketType.VIP]


def test_status_banner_escapes_text():
    html = status_banner("success", "<b>Jane</b>")

    assert "&lt;b&gt;Jane&lt;/b&gt;" in html
    assert "#10b981" in html


def test_status_banner_unknown_kind_uses_info_colours():
    assert "#3b82f6" in status_banner("mystery", "hello")


def test_activity_row_escapes_user_text():
    html = activity_row("<script>", "K3X9Q0ZLM", "09:05")

    assert "<script>" not in html
    assert "09:05" in html
