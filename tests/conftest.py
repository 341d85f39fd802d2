"""Shared fixtures."""
import itertools

import pytest

from src.config import reset_settings
from src.services.attendee_store import InMemoryAttendeeStore
from src.services.registry import Registry


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test without credentials and with a fresh settings cache."""
    for name in ("OPENAI_API_KEY", "ADMIN_USERNAME", "ADMIN_PASSWORD", "STORAGE_BACKEND", "EVENT_NAME"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("src.config.ENV_FILE", str(tmp_path / "missing.env"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fixed_clock():
    """Clock returning increasing timestamps one minute apart."""
    minutes = itertools.count()

    def clock():
        return f"2025-10-28T14:{next(minutes):02d}:00+08:00"

    return clock


@pytest.fixture
def registry(fixed_clock):
    """In-memory registry with a deterministic persona."""
    return Registry(
        InMemoryAttendeeStore(),
        persona_generator=lambda name, role, ticket: f"{role} Voyager",
        clock=fixed_clock,
    )
