"""Attendee data model for event registration and gate check-in."""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

from src.config import TICKET_LABELS
from src.utils.date_utils import is_valid_iso


class TicketType(str, Enum):
    """Ticket categories sold for the event."""

    GENERAL = "General"
    VIP = "VIP"
    SPEAKER = "Speaker"
    PRESS = "Press"

    @property
    def label(self) -> str:
        return TICKET_LABELS.get(self.value, self.value)

    @classmethod
    def parse(cls, value: Union["TicketType", str]) -> "TicketType":
        """
        Resolve a ticket type from an enum member, value, name or display label.

        Raises:
            ValueError: If the value matches no ticket type
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if wanted in (member.value.lower(), member.name.lower(), member.label.lower()):
                    return member
        raise ValueError(f"Unknown ticket type: {value!r}")


class CheckInStatus(str, Enum):
    """Attendee lifecycle: Registered, then Checked In exactly once."""

    REGISTERED = "Registered"
    CHECKED_IN = "Checked In"


@dataclass
class Attendee:
    """Registered participant tracked by the registry."""

    id: str
    full_name: str
    email: str
    role: str
    ticket_type: TicketType
    status: CheckInStatus = CheckInStatus.REGISTERED
    check_in_time: Optional[str] = None  # ISO 8601 format
    ai_persona: Optional[str] = None
    registered_at: Optional[str] = None  # ISO 8601 format

    def __post_init__(self):
        """Validate attendee data."""
        if not self.id or not self.id.strip():
            raise ValueError("Attendee ID cannot be empty")

        for field_name in ("full_name", "email", "role"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{field_name} cannot be empty")

        self.ticket_type = TicketType.parse(self.ticket_type)
        self.status = CheckInStatus(self.status)

        if self.status is CheckInStatus.CHECKED_IN and not self.check_in_time:
            raise ValueError("Checked-in attendee must have a check-in time")
        if self.status is CheckInStatus.REGISTERED and self.check_in_time:
            raise ValueError("Registered attendee cannot have a check-in time")
        if self.check_in_time and not is_valid_iso(self.check_in_time):
            raise ValueError(f"Invalid timestamp format: {self.check_in_time}")

    @property
    def is_checked_in(self) -> bool:
        return self.status is CheckInStatus.CHECKED_IN

    def checked_in(self, timestamp: str) -> "Attendee":
        """
        Return a copy transitioned to Checked In.

        Raises:
            ValueError: If the attendee is already checked in
        """
        if self.is_checked_in:
            raise ValueError(f"Attendee {self.id} is already checked in")
        return replace(self, status=CheckInStatus.CHECKED_IN, check_in_time=timestamp)

    def copy(self) -> "Attendee":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase keys of the wire and storage format."""
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "role": self.role,
            "ticketType": self.ticket_type.value,
            "status": self.status.value,
            "aiPersona": self.ai_persona,
            "checkInTime": self.check_in_time,
            "registeredAt": self.registered_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Attendee":
        return cls(
            id=data["id"],
            full_name=data["fullName"],
            email=data["email"],
            role=data["role"],
            ticket_type=data["ticketType"],
            status=data.get("status") or CheckInStatus.REGISTERED,
            check_in_time=data.get("checkInTime"),
            ai_persona=data.get("aiPersona"),
            registered_at=data.get("registeredAt"),
        )
