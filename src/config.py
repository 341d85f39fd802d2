"""Application configuration loaded from the environment and an optional .env file."""
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Optional

ENV_FILE = ".env"

# Display labels shown on tickets and in the admin dashboard.
TICKET_LABELS = {
    "General": "General Admission",
    "VIP": "VIP All Access",
    "Speaker": "Speaker",
    "Press": "Press Pass",
}

_ENV_LOADED = False
_ENV_LOCK = Lock()
_settings: Optional["Settings"] = None


def load_env_file(env_path: Optional[Path] = None) -> None:
    """
    Load KEY=VALUE pairs from a .env file into os.environ.

    Existing process environment variables win over file values. Blank lines
    and lines starting with '#' are skipped.
    """
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        env_path = Path(env_path or ENV_FILE)
        if env_path.exists():
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the gate application."""

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    persona_timeout_seconds: float = 8.0
    event_name: str = "Event Horizon 2024"
    storage_backend: str = "json"
    data_file: str = "data/attendees.json"
    database_file: str = "data/participants.db"
    admin_username: str = "admin"
    admin_password: str = ""
    log_level: str = "INFO"

    @property
    def has_ai_credentials(self) -> bool:
        return bool(self.openai_api_key)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_settings() -> Settings:
    """
    Return the process-wide settings, reading the environment on first call.

    Returns:
        Settings: Immutable settings snapshot
    """
    global _settings

    if _settings is not None:
        return _settings

    load_env_file()

    backend = os.getenv("STORAGE_BACKEND", "json").strip().lower()
    if backend not in {"memory", "json", "sqlite"}:
        backend = "json"

    _settings = Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        persona_timeout_seconds=_float_env("PERSONA_TIMEOUT_SECONDS", 8.0),
        event_name=os.getenv("EVENT_NAME", "Event Horizon 2024"),
        storage_backend=backend,
        data_file=os.getenv("DATA_FILE", "data/attendees.json"),
        database_file=os.getenv("DATABASE_FILE", "data/participants.db"),
        admin_username=os.getenv("ADMIN_USERNAME", "admin"),
        admin_password=os.getenv("ADMIN_PASSWORD", ""),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    global _settings, _ENV_LOADED
    _settings = None
    _ENV_LOADED = False
