"""Unit tests for the attendee store backends."""
import json
import threading

import pytest

from src.models.attendee import Attendee, CheckInStatus, TicketType
from src.services.attendee_store import (
    InMemoryAttendeeStore,
    JsonAttendeeStore,
    SqliteAttendeeStore,
    create_store,
)
from src.utils.exceptions import DuplicateAttendeeError, StorageError

CHECK_IN_TIME = "2025-10-28T14:32:10+08:00"


def make_attendee(attendee_id="K3X9Q0ZLM", name="Jane Doe"):
    return Attendee(
        id=attendee_id,
        full_name=name,
        email="jane@x.com",
        role="Engineer",
        ticket_type=TicketType.VIP,
        ai_persona="Code Whisperer",
        registered_at="2025-10-28T08:00:00+08:00",
    )


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryAttendeeStore()
    if request.param == "json":
        return JsonAttendeeStore(str(tmp_path / "attendees.json"))
    return SqliteAttendeeStore(str(tmp_path / "participants.db"))


class TestStoreContract:
    """Behaviour shared by every backend."""

    def test_add_and_get(self, store):
        store.add(make_attendee())

        fetched = store.get("K3X9Q0ZLM")

        assert fetched == make_attendee()
        assert store.contains("K3X9Q0ZLM") is True

    def test_get_unknown_returns_none(self, store):
        assert store.get("MISSING") is None
        assert store.contains("MISSING") is False

    def test_get_is_exact_match(self, store):
        store.add(make_attendee())
        assert store.get("k3x9q0zlm") is None

    def test_duplicate_id_rejected(self, store):
        store.add(make_attendee())

        with pytest.raises(DuplicateAttendeeError):
            store.add(make_attendee(name="Someone Else"))

    def test_all_preserves_registration_order(self, store):
        for attendee_id in ("CCC", "AAA", "BBB"):
            store.add(make_attendee(attendee_id))

        assert [a.id for a in store.all()] == ["CCC", "AAA", "BBB"]

    def test_returned_records_are_copies(self, store):
        store.add(make_attendee())

        fetched = store.get("K3X9Q0ZLM")
        fetched.full_name = "Mallory"

        assert store.get("K3X9Q0ZLM").full_name == "Jane Doe"

    def test_mark_checked_in_transitions_once(self, store):
        store.add(make_attendee())

        first, changed = store.mark_checked_in("K3X9Q0ZLM", CHECK_IN_TIME)
        second, changed_again = store.mark_checked_in("K3X9Q0ZLM", "2025-10-28T15:00:00+08:00")

        assert changed is True
        assert first.status is CheckInStatus.CHECKED_IN
        assert first.check_in_time == CHECK_IN_TIME
        assert changed_again is False
        assert second.check_in_time == CHECK_IN_TIME

    def test_mark_checked_in_unknown(self, store):
        assert store.mark_checked_in("MISSING", CHECK_IN_TIME) == (None, False)

    def test_concurrent_check_in_has_single_winner(self, store):
        store.add(make_attendee())
        outcomes = []
        barrier = threading.Barrier(8)

        def attempt():
            barrier.wait()
            outcomes.append(store.mark_checked_in("K3X9Q0ZLM", CHECK_IN_TIME)[1])

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count(True) == 1
        assert outcomes.count(False) == 7


class TestJsonAttendeeStore:

    def test_file_layout(self, tmp_path):
        path = tmp_path / "attendees.json"
        store = JsonAttendeeStore(str(path))
        store.add(make_attendee())

        data = json.loads(path.read_text(encoding="utf-8"))

        assert list(data) == ["attendees"]
        assert data["attendees"][0]["fullName"] == "Jane Doe"
        assert data["attendees"][0]["status"] == "Registered"

    def test_creates_missing_directories(self, tmp_path):
        path = tmp_path / "nested" / "data" / "attendees.json"

        JsonAttendeeStore(str(path))

        assert json.loads(path.read_text(encoding="utf-8")) == {"attendees": []}

    def test_two_instances_share_state(self, tmp_path):
        path = str(tmp_path / "attendees.json")
        writer = JsonAttendeeStore(path)
        reader = JsonAttendeeStore(path)

        writer.add(make_attendee())
        writer.mark_checked_in("K3X9Q0ZLM", CHECK_IN_TIME)

        assert reader.get("K3X9Q0ZLM").is_checked_in is True

    def test_malformed_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "attendees.json"
        store = JsonAttendeeStore(str(path))
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            store.all()


class TestSqliteAttendeeStore:

    def test_two_instances_share_state(self, tmp_path):
        path = str(tmp_path / "participants.db")
        writer = SqliteAttendeeStore(path)
        reader = SqliteAttendeeStore(path)

        writer.add(make_attendee())
        reader_result = reader.mark_checked_in("K3X9Q0ZLM", CHECK_IN_TIME)

        assert reader_result[1] is True
        assert writer.get("K3X9Q0ZLM").check_in_time == CHECK_IN_TIME


class TestCreateStore:

    def test_memory(self):
        assert isinstance(create_store("memory"), InMemoryAttendeeStore)

    def test_json(self, tmp_path):
        store = create_store("json", data_file=str(tmp_path / "a.json"))
        assert isinstance(store, JsonAttendeeStore)

    def test_sqlite(self, tmp_path):
        store = create_store("sqlite", database_file=str(tmp_path / "a.db"))
        assert isinstance(store, SqliteAttendeeStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown storage backend"):
            create_store("redis")
