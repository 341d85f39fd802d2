"""Ticket QR payload encoding, rendering and decoding."""
import io
import json
import logging
from typing import Optional
from urllib.parse import quote

import cv2
import numpy as np
import qrcode
from qrcode.constants import ERROR_CORRECT_H

from src.models.attendee import Attendee

logger = logging.getLogger(__name__)

WHATSAPP_SHARE_URL = "https://wa.me/?text="


def encode(attendee: Attendee, event_tag: str) -> str:
    """
    Encode an attendee's public fields into a QR payload.

    Args:
        attendee: Registered attendee
        event_tag: Event name embedded in the ticket

    Returns:
        str: JSON text {"id", "name", "ticketType", "event"}
    """
    return json.dumps(
        {
            "id": attendee.id,
            "name": attendee.full_name,
            "ticketType": attendee.ticket_type.value,
            "event": event_tag,
        },
        ensure_ascii=False,
    )


def decode(payload: str) -> str:
    """
    Extract the attendee ID from a scanned payload.

    Structured payloads (JSON objects with an "id") yield that ID; anything
    else, including plain text IDs, is returned whole, stripped.
    """
    if payload is None:
        return ""
    text = payload.strip()
    try:
        data = json.loads(text)
    except ValueError:
        return text
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"]).strip()
    return text


def render_qr_png(payload: str, box_size: int = 8, border: int = 1) -> bytes:
    """Render a payload as a high-error-correction QR code PNG."""
    qr = qrcode.QRCode(version=None, error_correction=ERROR_CORRECT_H, box_size=box_size, border=border)
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(image_bytes: bytes) -> Optional[str]:
    """
    Decode the first QR code found in an image.

    Args:
        image_bytes: Encoded image (PNG/JPEG) such as a camera snapshot

    Returns:
        The QR text, or None if the image has no readable code
    """
    if not image_bytes:
        return None

    image = cv2.imdecode(np.frombuffer(image_bytes, np.uint8), cv2.IMREAD_COLOR)
    if image is None:
        logger.warning("Camera image could not be decoded")
        return None

    detector = cv2.QRCodeDetector()
    try:
        qr_data, _bbox, _straight = detector.detectAndDecode(image)
    except cv2.error as e:
        logger.warning("QR detection failed: %s", e)
        return None
    return qr_data or None


def build_share_text(attendee: Attendee, event_name: str) -> str:
    """Plain-text ticket summary for messaging apps."""
    return (
        f"🚀 {event_name} Ticket\n\n"
        f"👤 Name: {attendee.full_name}\n"
        f"🎫 Type: {attendee.ticket_type.label}\n"
        f"🆔 Ref: {attendee.id}\n\n"
        "Present this message or your QR code at the gate!"
    )


def whatsapp_share_url(attendee: Attendee, event_name: str) -> str:
    return WHATSAPP_SHARE_URL + quote(build_share_text(attendee, event_name))
