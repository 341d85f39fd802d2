"""Check-in outcome types."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.models.attendee import Attendee


class CheckInOutcome(str, Enum):
    CHECKED_IN = "checked_in"
    ALREADY_CHECKED_IN = "already_checked_in"
    NOT_FOUND = "not_found"


class CheckInSource(str, Enum):
    """Where a check-in attempt came from."""

    MANUAL = "manual"
    CAMERA = "camera"
    SCANNER = "scanner"
    API = "api"


@dataclass(frozen=True)
class CheckInResult:
    """Structured result of a check-in attempt; expected failures are not exceptions."""

    success: bool
    message: str
    outcome: CheckInOutcome
    attendee: Optional[Attendee] = None

    @classmethod
    def welcomed(cls, attendee: Attendee) -> "CheckInResult":
        return cls(True, f"Welcome, {attendee.full_name}!", CheckInOutcome.CHECKED_IN, attendee)

    @classmethod
    def already_checked_in(cls, attendee: Attendee) -> "CheckInResult":
        return cls(
            False,
            f"{attendee.full_name} already checked in.",
            CheckInOutcome.ALREADY_CHECKED_IN,
            attendee,
        )

    @classmethod
    def not_found(cls, attendee_id: str) -> "CheckInResult":
        if not attendee_id:
            return cls(False, "Enter a ticket ID.", CheckInOutcome.NOT_FOUND)
        return cls(False, f"Ticket ID {attendee_id} not found.", CheckInOutcome.NOT_FOUND)
