"""Registry: the single owner of attendee records and the check-in rule."""
import logging
import secrets
import string
import threading
from typing import Callable, List, Optional, Union

from src.config import Settings, get_settings
from src.models.attendee import Attendee, CheckInStatus, TicketType
from src.models.check_in import CheckInResult
from src.services.attendee_store import AttendeeStore, create_store
from src.services.persona_service import FALLBACK_PERSONA, generate_persona
from src.utils.date_utils import now_iso
from src.utils.exceptions import DuplicateAttendeeError, ValidationError
from src.utils.validation import normalize_ticket_id

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_uppercase + string.digits
ID_LENGTH = 9
MAX_ID_ATTEMPTS = 10

PersonaGenerator = Callable[[str, str, str], str]


def generate_attendee_id(length: int = ID_LENGTH) -> str:
    """Random upper-case base-36 ticket ID, e.g. "K3X9Q0ZLM"."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


class Registry:
    """
    Attendee registry shared by the registration UI, the gate dashboard,
    the scanner feed and the REST API.

    The hosting process creates one instance and passes it to its handlers.
    Status changes only happen in check_in(), which serialises the
    read-check-write sequence so concurrent attempts on one ID resolve to
    exactly one success.
    """

    def __init__(
        self,
        store: AttendeeStore,
        persona_generator: PersonaGenerator = generate_persona,
        clock: Callable[[], str] = now_iso,
        id_factory: Callable[[], str] = generate_attendee_id,
    ):
        self._store = store
        self._persona_generator = persona_generator
        self._clock = clock
        self._id_factory = id_factory
        self._check_in_lock = threading.Lock()

    @property
    def store(self) -> AttendeeStore:
        return self._store

    def register(
        self,
        full_name: str,
        email: str,
        role: str,
        ticket_type: Union[TicketType, str],
    ) -> Attendee:
        """
        Register a new attendee.

        Args:
            full_name: Attendee's full name
            email: Contact email
            role: Job role or title
            ticket_type: TicketType member, value or display label

        Returns:
            Attendee: Copy of the stored record (status Registered)

        Raises:
            ValidationError: If a field is empty or the ticket type is unknown
            StorageError: If the store cannot be written
        """
        for field_name, value in (("full name", full_name), ("email", email), ("role", role)):
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{field_name} is required")
        try:
            ticket = TicketType.parse(ticket_type)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        full_name, email, role = full_name.strip(), email.strip(), role.strip()
        persona = self._request_persona(full_name, role, ticket)

        for _ in range(MAX_ID_ATTEMPTS):
            attendee = Attendee(
                id=self._id_factory(),
                full_name=full_name,
                email=email,
                role=role,
                ticket_type=ticket,
                ai_persona=persona,
                registered_at=self._clock(),
            )
            try:
                self._store.add(attendee)
            except DuplicateAttendeeError:
                logger.warning("Generated attendee ID %s collided, retrying", attendee.id)
                continue
            logger.info("Registered %s (%s) as %s", attendee.full_name, attendee.ticket_type.value, attendee.id)
            return attendee.copy()

        raise DuplicateAttendeeError(f"Could not allocate a unique attendee ID after {MAX_ID_ATTEMPTS} attempts")

    def _request_persona(self, full_name: str, role: str, ticket: TicketType) -> str:
        try:
            persona = self._persona_generator(full_name, role, ticket.label)
        except Exception:
            logger.exception("Persona generator failed for %s", full_name)
            return FALLBACK_PERSONA
        if not isinstance(persona, str) or not persona.strip():
            return FALLBACK_PERSONA
        return persona.strip()

    def check_in(self, raw_id: str) -> CheckInResult:
        """
        Check an attendee in at the gate.

        Args:
            raw_id: Ticket ID as typed or decoded; trimmed and upper-cased here

        Returns:
            CheckInResult:
            - success with the updated record on the Registered → Checked In transition
            - failure with the unmodified record if already checked in
            - failure without a record if the ID is unknown

        Raises:
            StorageError: If the store cannot be read or written
        """
        attendee_id = normalize_ticket_id(raw_id)
        if not attendee_id:
            return CheckInResult.not_found(attendee_id)

        with self._check_in_lock:
            record, changed = self._store.mark_checked_in(attendee_id, self._clock())

        if record is None:
            logger.info("Check-in for unknown ticket %s", attendee_id)
            return CheckInResult.not_found(attendee_id)
        if not changed:
            logger.info("Duplicate check-in for %s (%s)", record.full_name, record.id)
            return CheckInResult.already_checked_in(record)

        logger.info("Checked in %s (%s) at %s", record.full_name, record.id, record.check_in_time)
        return CheckInResult.welcomed(record)

    def get(self, raw_id: str) -> Optional[Attendee]:
        attendee_id = normalize_ticket_id(raw_id)
        if not attendee_id:
            return None
        return self._store.get(attendee_id)

    def list(self, status: Optional[CheckInStatus] = None) -> List[Attendee]:
        """
        All attendees in registration order.

        Args:
            status: Optional filter on CheckInStatus

        Returns:
            List[Attendee]: Copies; mutating them does not affect the store
        """
        attendees = self._store.all()
        if status is None:
            return attendees
        status = CheckInStatus(status)
        return [a for a in attendees if a.status is status]


def build_registry(settings: Optional[Settings] = None) -> Registry:
    """Create a Registry over the store selected by STORAGE_BACKEND."""
    settings = settings or get_settings()
    store = create_store(settings.storage_backend, settings.data_file, settings.database_file)
    logger.info("Using %s attendee store", settings.storage_backend)

    def persona_generator(name: str, role: str, ticket_label: str) -> str:
        return generate_persona(name, role, ticket_label, settings=settings)

    return Registry(store, persona_generator=persona_generator)
