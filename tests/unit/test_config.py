"""Unit tests for configuration loading."""
from src import config
from src.config import get_settings, reset_settings


class TestGetSettings:
    """Test get_settings function."""

    def test_defaults_without_environment(self):
        settings = get_settings()

        assert settings.openai_api_key == ""
        assert settings.has_ai_credentials is False
        assert settings.event_name == "Event Horizon 2024"
        assert settings.storage_backend == "json"
        assert settings.admin_username == "admin"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("STORAGE_BACKEND", "SQLite")
        monkeypatch.setenv("PERSONA_TIMEOUT_SECONDS", "2.5")

        settings = get_settings()

        assert settings.has_ai_credentials is True
        assert settings.storage_backend == "sqlite"
        assert settings.persona_timeout_seconds == 2.5

    def test_unknown_backend_falls_back_to_json(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "postgres")
        assert get_settings().storage_backend == "json"

    def test_invalid_timeout_uses_default(self, monkeypatch):
        monkeypatch.setenv("PERSONA_TIMEOUT_SECONDS", "soon")
        assert get_settings().persona_timeout_seconds == 8.0

    def test_settings_are_cached_until_reset(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("EVENT_NAME", "Changed")
        assert get_settings() is first

        reset_settings()
        assert get_settings().event_name == "Changed"


class TestLoadEnvFile:
    """Test .env parsing."""

    def test_env_file_values_loaded(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text('# comment\nEVENT_NAME="Gate Night"\n\nADMIN_PASSWORD=secret\n', encoding="utf-8")
        monkeypatch.setattr(config, "ENV_FILE", str(env_file))

        settings = get_settings()

        assert settings.event_name == "Gate Night"
        assert settings.admin_password == "secret"

    def test_process_environment_wins(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("EVENT_NAME=From File\n", encoding="utf-8")
        monkeypatch.setattr(config, "ENV_FILE", str(env_file))
        monkeypatch.setenv("EVENT_NAME", "From Env")

        assert get_settings().event_name == "From Env"
