"""Gate check-in entry points: manual entry, camera snapshots and the scanner feed."""
import logging
import queue
import threading
import time
from typing import Callable, Dict, Optional

from src.models.check_in import CheckInResult, CheckInSource
from src.services import ticket_codec
from src.services.registry import Registry

logger = logging.getLogger(__name__)

SCANNED_SOURCES = {CheckInSource.CAMERA, CheckInSource.SCANNER}


def process_check_in(
    registry: Registry,
    raw_input: str,
    source: CheckInSource = CheckInSource.MANUAL,
) -> CheckInResult:
    """
    Run one check-in attempt from any gate entry method.

    Args:
        registry: Registry owned by the hosting process
        raw_input: Typed ticket ID or scanned QR text
        source: Entry method; scanned payloads are decoded first

    Returns:
        CheckInResult from Registry.check_in, or a not-found result for
        empty input
    """
    text = raw_input or ""
    if source in SCANNED_SOURCES:
        text = ticket_codec.decode(text)

    if not text.strip():
        return CheckInResult.not_found("")

    result = registry.check_in(text)
    logger.info("Check-in via %s: %s", source.value, result.outcome.value)
    return result


def check_in_from_image(registry: Registry, image_bytes: bytes) -> Optional[CheckInResult]:
    """
    Decode a camera snapshot and check the ticket in.

    Returns:
        CheckInResult, or None if no QR code was found in the image
    """
    payload = ticket_codec.decode_qr_image(image_bytes)
    if payload is None:
        return None
    return process_check_in(registry, payload, CheckInSource.CAMERA)


class ScanEventSource:
    """
    Asynchronous feed of decoded QR payloads.

    A camera loop calls submit() for every decoded frame; a worker thread
    drains the queue and calls process_check_in(), then on_result(). The
    same payload seen again within cooldown_seconds is dropped before it
    reaches the registry.

    Example:
        >>> source = ScanEventSource(registry, on_result=print)
        >>> source.start()
        >>> source.submit('{"id": "K3X9Q0ZLM"}')
        >>> source.stop()
    """

    def __init__(
        self,
        registry: Registry,
        on_result: Callable[[CheckInResult], None],
        cooldown_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.registry = registry
        self.on_result = on_result
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._last_seen: Dict[str, float] = {}
        self._seen_lock = threading.Lock()
        self.thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def start(self) -> None:
        """Start the worker thread."""
        if self.is_running:
            return
        self.thread = threading.Thread(target=self._run, name="scan-event-source", daemon=True)
        self.thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Process queued scans, then stop the worker."""
        if not self.is_running:
            return
        self._queue.put(None)
        self.thread.join(timeout=timeout)
        self.thread = None

    def submit(self, payload: str) -> bool:
        """
        Queue a decoded payload.

        Returns:
            True if queued, False if dropped as a repeat within the cooldown
        """
        if not payload:
            return False
        key = ticket_codec.decode(payload)
        now = self._clock()
        with self._seen_lock:
            last = self._last_seen.get(key)
            if last is not None and now - last < self.cooldown_seconds:
                return False
            self._last_seen[key] = now
        self._queue.put(payload)
        return True

    def join(self) -> None:
        """Block until every queued payload has been processed."""
        self._queue.join()

    def _run(self) -> None:
        while True:
            payload = self._queue.get()
            try:
                if payload is None:
                    return
                result = process_check_in(self.registry, payload, CheckInSource.SCANNER)
                self.on_result(result)
            except Exception:
                logger.exception("Scanner check-in failed for payload %r", payload)
            finally:
                self._queue.task_done()
