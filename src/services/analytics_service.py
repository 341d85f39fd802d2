"""Read-only attendance projections for the gate dashboard."""
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from src.models.attendee import Attendee, TicketType
from src.utils.date_utils import format_clock_time, parse_iso


@dataclass(frozen=True)
class AttendanceStats:
    """Headline numbers for the live analytics panel."""

    total: int
    checked_in: int
    by_ticket_type: Dict[str, int] = field(default_factory=dict)

    @property
    def percentage(self) -> float:
        """Checked-in share of registrations (0-100)."""
        if self.total == 0:
            return 0.0
        return (self.checked_in / self.total) * 100.0

    @property
    def remaining(self) -> int:
        return self.total - self.checked_in


def summarize(attendees: Sequence[Attendee]) -> AttendanceStats:
    """
    Count registrations, check-ins and the ticket type distribution.

    Ticket types appear in TicketType order keyed by display label;
    types with no registrations are omitted.
    """
    counts = {ticket_type: 0 for ticket_type in TicketType}
    checked_in = 0
    for attendee in attendees:
        counts[attendee.ticket_type] += 1
        if attendee.is_checked_in:
            checked_in += 1

    distribution = {t.label: n for t, n in counts.items() if n > 0}
    return AttendanceStats(total=len(attendees), checked_in=checked_in, by_ticket_type=distribution)


def recent_check_ins(attendees: Sequence[Attendee], limit: int = 5) -> List[Attendee]:
    """
    Most recent check-ins first.

    Args:
        attendees: Snapshot from Registry.list()
        limit: Maximum number returned (default 5)
    """
    checked_in = [a for a in attendees if a.is_checked_in]
    checked_in.sort(key=lambda a: parse_iso(a.check_in_time), reverse=True)
    return checked_in[:limit]


def attendee_rows(attendees: Sequence[Attendee]) -> List[Dict[str, str]]:
    """Flatten attendees for the dashboard table."""
    return [
        {
            "Ticket ID": a.id,
            "Name": a.full_name,
            "Email": a.email,
            "Role": a.role,
            "Ticket": a.ticket_type.label,
            "Persona": a.ai_persona or "",
            "Status": a.status.value,
            "Checked In": format_clock_time(a.check_in_time) if a.is_checked_in else "",
        }
        for a in attendees
    ]
