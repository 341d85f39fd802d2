"""Unit tests for ticket_codec."""
import json
from urllib.parse import unquote

from src.models.attendee import Attendee, TicketType
from src.services import ticket_codec


def make_attendee():
    return Attendee("K3X9Q0ZLM", "Jane Doe", "jane@x.com", "Engineer", TicketType.VIP)


class TestEncode:

    def test_payload_fields(self):
        payload = json.loads(ticket_codec.encode(make_attendee(), "EventHorizon2024"))

        assert payload == {
            "id": "K3X9Q0ZLM",
            "name": "Jane Doe",
            "ticketType": "VIP",
            "event": "EventHorizon2024",
        }

    def test_payload_omits_private_fields(self):
        payload = ticket_codec.encode(make_attendee(), "EventHorizon2024")
        assert "jane@x.com" not in payload

    def test_decode_recovers_id(self):
        payload = ticket_codec.encode(make_attendee(), "EventHorizon2024")
        assert ticket_codec.decode(payload) == "K3X9Q0ZLM"


class TestDecode:

    def test_plain_text_id(self):
        assert ticket_codec.decode("  K3X9Q0ZLM \n") == "K3X9Q0ZLM"

    def test_json_without_id_is_returned_whole(self):
        assert ticket_codec.decode('{"name": "Jane"}') == '{"name": "Jane"}'

    def test_json_scalar_is_returned_whole(self):
        assert ticket_codec.decode("12345") == "12345"

    def test_none(self):
        assert ticket_codec.decode(None) == ""


class TestQrImages:

    def test_render_produces_png(self):
        png = ticket_codec.render_qr_png("K3X9Q0ZLM")
        assert png.startswith(b"\x89PNG")

    def test_rendered_code_can_be_read_back(self):
        payload = ticket_codec.encode(make_attendee(), "EventHorizon2024")

        decoded = ticket_codec.decode_qr_image(ticket_codec.render_qr_png(payload, box_size=10, border=4))

        assert decoded == payload

    def test_empty_bytes(self):
        assert ticket_codec.decode_qr_image(b"") is None

    def test_not_an_image(self):
        assert ticket_codec.decode_qr_image(b"definitely not a picture") is None


class TestShareText:

    def test_share_text_contents(self):
        text = ticket_codec.build_share_text(make_attendee(), "Event Horizon 2024")

        assert "Event Horizon 2024" in text
        assert "Jane Doe" in text
        assert "VIP All Access" in text
        assert "K3X9Q0ZLM" in text

    def test_whatsapp_url_is_encoded(self):
        url = ticket_codec.whatsapp_share_url(make_attendee(), "Event Horizon 2024")

        assert url.startswith(ticket_codec.WHATSAPP_SHARE_URL)
        assert " " not in url
        assert "Jane Doe" in unquote(url)
