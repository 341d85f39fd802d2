"""Unit tests for CheckInResult factories."""
from src.models.attendee import Attendee, TicketType
from src.models.check_in import CheckInOutcome, CheckInResult


def test_welcomed_result():
    attendee = Attendee("K3X9Q0ZLM", "Jane Doe", "jane@x.com", "Engineer", TicketType.VIP)

    result = CheckInResult.welcomed(attendee)

    assert result.success is True
    assert result.outcome is CheckInOutcome.CHECKED_IN
    assert result.message == "Welcome, Jane Doe!"
    assert result.attendee is attendee


def test_already_checked_in_result_keeps_record():
    attendee = Attendee("K3X9Q0ZLM", "Jane Doe", "jane@x.com", "Engineer", TicketType.VIP)

    result = CheckInResult.already_checked_in(attendee)

    assert result.success is False
    assert result.outcome is CheckInOutcome.ALREADY_CHECKED_IN
    assert result.message == "Jane Doe already checked in."
    assert result.attendee is attendee


def test_not_found_result():
    result = CheckInResult.not_found("NOPE")

    assert result.success is False
    assert result.outcome is CheckInOutcome.NOT_FOUND
    assert result.message == "Ticket ID NOPE not found."
    assert result.attendee is None


def test_not_found_for_empty_input():
    assert CheckInResult.not_found("").message == "Enter a ticket ID."
