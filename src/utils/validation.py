"""Data validation utilities."""
import re
from typing import Tuple

from src.models.attendee import TicketType

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")
MAX_NAME_LENGTH = 100


def validate_name(name: str) -> Tuple[bool, str]:
    """
    Validate attendee full name.

    Args:
        name: Name to validate

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if valid
        - (False, "Full name is required") if empty
        - (False, "Full name cannot exceed 100 characters") if too long
    """
    if not name or not name.strip():
        return False, "Full name is required"
    if len(name.strip()) > MAX_NAME_LENGTH:
        return False, f"Full name cannot exceed {MAX_NAME_LENGTH} characters"
    return True, ""


def validate_email(email: str) -> Tuple[bool, str]:
    """Validate email presence and a loose address shape."""
    if not email or not email.strip():
        return False, "Email address is required"
    if not EMAIL_PATTERN.match(email.strip()):
        return False, "Email address is not valid"
    return True, ""


def validate_ticket_type(ticket_type) -> Tuple[bool, str]:
    try:
        TicketType.parse(ticket_type)
    except ValueError:
        valid = ", ".join(t.value for t in TicketType)
        return False, f"Ticket type must be one of: {valid}"
    return True, ""


def validate_registration(
    full_name: str,
    email: str,
    role: str,
    ticket_type,
) -> Tuple[bool, str]:
    """
    Validate a registration form submission.

    Args:
        full_name: Attendee's full name
        email: Contact email
        role: Job role or title
        ticket_type: TicketType member, value or label

    Returns:
        Tuple of (is_valid: bool, error_message: str); the message names the
        first failing field.
    """
    is_valid, error_msg = validate_name(full_name)
    if not is_valid:
        return False, error_msg

    is_valid, error_msg = validate_email(email)
    if not is_valid:
        return False, error_msg

    if not role or not role.strip():
        return False, "Job role is required"

    return validate_ticket_type(ticket_type)


def normalize_ticket_id(raw_id: str) -> str:
    """
    Normalize a ticket ID typed or scanned at the gate.

    Behavior:
        - Trims leading/trailing whitespace
        - Upper-cases (IDs are generated upper-case)
        - Example: " abc123xyz " → "ABC123XYZ"
    """
    if not raw_id:
        return ""
    return raw_id.strip().upper()
