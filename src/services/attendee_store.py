"""Attendee persistence backends: in-memory, JSON file and SQLite table."""
import json
import logging
import os
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from src.models.attendee import Attendee, CheckInStatus
from src.services.storage_service import ensure_json_file, load_json, lock_file, save_json
from src.utils.exceptions import DuplicateAttendeeError, StorageError

logger = logging.getLogger(__name__)


class AttendeeStore(ABC):
    """
    Storage contract used by the Registry.

    Stores hand out copies; callers never mutate stored records directly.
    The only status mutation is mark_checked_in, which each backend performs
    as one atomic conditional update.
    """

    @abstractmethod
    def add(self, attendee: Attendee) -> None:
        """Insert a new record. Raises DuplicateAttendeeError on an ID clash."""

    @abstractmethod
    def get(self, attendee_id: str) -> Optional[Attendee]:
        """Return a copy of the record with exactly this ID, or None."""

    @abstractmethod
    def all(self) -> List[Attendee]:
        """Return copies of all records in registration order."""

    @abstractmethod
    def mark_checked_in(self, attendee_id: str, timestamp: str) -> Tuple[Optional[Attendee], bool]:
        """
        Transition a Registered record to Checked In.

        Returns:
            (record, changed): (None, False) if the ID is unknown; the
            existing record and False if it was already checked in; the
            updated record and True on transition.
        """

    def contains(self, attendee_id: str) -> bool:
        return self.get(attendee_id) is not None


class InMemoryAttendeeStore(AttendeeStore):
    """Process-local store; the single-session deployment shape."""

    def __init__(self):
        self._records: Dict[str, Attendee] = {}
        self._lock = threading.Lock()

    def add(self, attendee: Attendee) -> None:
        with self._lock:
            if attendee.id in self._records:
                raise DuplicateAttendeeError(f"Attendee ID already exists: {attendee.id}")
            self._records[attendee.id] = attendee.copy()

    def get(self, attendee_id: str) -> Optional[Attendee]:
        with self._lock:
            record = self._records.get(attendee_id)
            return record.copy() if record else None

    def all(self) -> List[Attendee]:
        with self._lock:
            return [record.copy() for record in self._records.values()]

    def mark_checked_in(self, attendee_id: str, timestamp: str) -> Tuple[Optional[Attendee], bool]:
        with self._lock:
            record = self._records.get(attendee_id)
            if record is None:
                return None, False
            if record.is_checked_in:
                return record.copy(), False
            updated = record.checked_in(timestamp)
            self._records[attendee_id] = updated
            return updated.copy(), True


class JsonAttendeeStore(AttendeeStore):
    """
    Store backed by a JSON document {"attendees": [...]}.

    Every write reloads the file under lock_file so several processes
    (Streamlit workers, the REST server, the gate scanner) can share it.
    """

    def __init__(self, file_path: str, lock_timeout: float = 5.0):
        self.file_path = file_path
        self.lock_timeout = lock_timeout
        try:
            ensure_json_file(self.file_path, {"attendees": []})
        except (OSError, TimeoutError) as e:
            raise StorageError(f"Cannot initialise attendee file {file_path}: {e}") from e

    def _read_records(self) -> List[dict]:
        try:
            data = load_json(self.file_path)
        except FileNotFoundError:
            return []
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read attendee file {self.file_path}: {e}") from e
        return data.get("attendees", [])

    def _write_records(self, records: List[dict]) -> None:
        try:
            save_json(self.file_path, {"attendees": records})
        except IOError as e:
            raise StorageError(str(e)) from e

    def add(self, attendee: Attendee) -> None:
        try:
            with lock_file(self.file_path, timeout=self.lock_timeout):
                records = self._read_records()
                if any(r.get("id") == attendee.id for r in records):
                    raise DuplicateAttendeeError(f"Attendee ID already exists: {attendee.id}")
                records.append(attendee.to_dict())
                self._write_records(records)
        except TimeoutError as e:
            raise StorageError(str(e)) from e

    def get(self, attendee_id: str) -> Optional[Attendee]:
        for record in self._read_records():
            if record.get("id") == attendee_id:
                return Attendee.from_dict(record)
        return None

    def all(self) -> List[Attendee]:
        return [Attendee.from_dict(record) for record in self._read_records()]

    def mark_checked_in(self, attendee_id: str, timestamp: str) -> Tuple[Optional[Attendee], bool]:
        try:
            with lock_file(self.file_path, timeout=self.lock_timeout):
                records = self._read_records()
                for index, record in enumerate(records):
                    if record.get("id") != attendee_id:
                        continue
                    attendee = Attendee.from_dict(record)
                    if attendee.is_checked_in:
                        return attendee, False
                    updated = attendee.checked_in(timestamp)
                    records[index] = updated.to_dict()
                    self._write_records(records)
                    return updated, True
                return None, False
        except TimeoutError as e:
            raise StorageError(str(e)) from e


class SqliteAttendeeStore(AttendeeStore):
    """Store backed by one SQLite table, one row per attendee."""

    table_def = """
        CREATE TABLE IF NOT EXISTS attendees (
            id TEXT PRIMARY KEY,
            fullName TEXT NOT NULL,
            email TEXT NOT NULL,
            role TEXT NOT NULL,
            ticketType TEXT NOT NULL,
            status TEXT NOT NULL,
            aiPersona TEXT,
            checkInTime TEXT,
            registeredAt TEXT
        );
    """
    columns = (
        "id", "fullName", "email", "role", "ticketType",
        "status", "aiPersona", "checkInTime", "registeredAt",
    )

    def __init__(self, db_path: str, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        try:
            conn = self.get_db_connection()
            try:
                conn.execute(self.table_def)
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {db_path}: {e}") from e

    def get_db_connection(self) -> sqlite3.Connection:
        """Autocommit connection; transactions are opened explicitly."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def add(self, attendee: Attendee) -> None:
        record = attendee.to_dict()
        column_list = ", ".join(self.columns)
        placeholders = ", ".join(":" + column for column in self.columns)
        query = f"""
            INSERT INTO attendees ({column_list})
                 VALUES ({placeholders});
        """
        conn = self.get_db_connection()
        try:
            conn.execute(query, record)
        except sqlite3.IntegrityError as e:
            raise DuplicateAttendeeError(f"Attendee ID already exists: {attendee.id}") from e
        except sqlite3.Error as e:
            raise StorageError(f"Failed to insert attendee {attendee.id}: {e}") from e
        finally:
            conn.close()

    def get(self, attendee_id: str) -> Optional[Attendee]:
        conn = self.get_db_connection()
        try:
            row = conn.execute("SELECT * FROM attendees WHERE id = ?;", (attendee_id,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read attendee {attendee_id}: {e}") from e
        finally:
            conn.close()
        return Attendee.from_dict(dict(row)) if row else None

    def all(self) -> List[Attendee]:
        conn = self.get_db_connection()
        try:
            rows = conn.execute("SELECT * FROM attendees ORDER BY rowid;").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list attendees: {e}") from e
        finally:
            conn.close()
        return [Attendee.from_dict(dict(row)) for row in rows]

    def mark_checked_in(self, attendee_id: str, timestamp: str) -> Tuple[Optional[Attendee], bool]:
        conn = self.get_db_connection()
        try:
            conn.execute("BEGIN IMMEDIATE;")
            try:
                cursor = conn.execute(
                    """
                    UPDATE attendees
                       SET status = :checked_in, checkInTime = :timestamp
                     WHERE id = :id AND status = :registered;
                    """,
                    {
                        "checked_in": CheckInStatus.CHECKED_IN.value,
                        "registered": CheckInStatus.REGISTERED.value,
                        "timestamp": timestamp,
                        "id": attendee_id,
                    },
                )
                changed = cursor.rowcount == 1
                row = conn.execute("SELECT * FROM attendees WHERE id = ?;", (attendee_id,)).fetchone()
                conn.execute("COMMIT;")
            except sqlite3.Error:
                conn.execute("ROLLBACK;")
                raise
        except sqlite3.Error as e:
            raise StorageError(f"Failed to check in attendee {attendee_id}: {e}") from e
        finally:
            conn.close()

        if row is None:
            return None, False
        return Attendee.from_dict(dict(row)), changed


def create_store(backend: str, data_file: str = "", database_file: str = "") -> AttendeeStore:
    """
    Build the store named by configuration.

    Args:
        backend: "memory", "json" or "sqlite"
        data_file: JSON document path for the json backend
        database_file: SQLite path for the sqlite backend

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == "memory":
        return InMemoryAttendeeStore()
    if backend == "json":
        return JsonAttendeeStore(data_file)
    if backend == "sqlite":
        return SqliteAttendeeStore(database_file)
    raise ValueError(f"Unknown storage backend: {backend}")
