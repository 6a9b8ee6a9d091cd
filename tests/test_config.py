"""Tests for fxadvisor.config — environment variable loading and validation."""

import pytest

from fxadvisor.config import Config, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Ensure advisor env vars are cleared between tests."""
    for var in [
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "OPENAI_MODEL",
        "OPENAI_VISION_MODEL",
        "TWELVE_DATA_API_KEY",
        "TWELVE_DATA_BASE_URL",
        "CANDLE_INTERVAL",
        "CANDLE_COUNT",
        "REQUEST_TIMEOUT_SECONDS",
        "SESSION_TTL_SECONDS",
        "SYSTEM_PROMPT_PATH",
        "DATA_DIR",
        "FOREX_REFRESH_SECONDS",
        "MAX_UPLOAD_MB",
        "LOG_LEVEL",
        "PORT",
    ]:
        monkeypatch.delenv(var, raising=False)


def _set_required(monkeypatch):
    """Set the minimum required environment variables."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-abc123")
    monkeypatch.setenv("TWELVE_DATA_API_KEY", "td-test-xyz")


def _load(tmp_path) -> Config:
    # Non-existent env_path so load_dotenv doesn't pick up a real .env file
    return load_config(env_path=str(tmp_path / "nonexistent.env"))


class TestLoadConfig:
    def test_loads_required_vars(self, monkeypatch, tmp_path):
        _set_required(monkeypatch)
        cfg = _load(tmp_path)
        assert cfg.openai_api_key == "sk-test-abc123"
        assert cfg.twelve_data_api_key == "td-test-xyz"

    def test_defaults(self, monkeypatch, tmp_path):
        _set_required(monkeypatch)
        cfg = _load(tmp_path)
        assert cfg.openai_base_url == "https://api.openai.com/v1"
        assert cfg.openai_model == "gpt-3.5-turbo"
        assert cfg.openai_vision_model == "gpt-4o-mini"
        assert cfg.twelve_data_base_url == "https://api.twelvedata.com"
        assert cfg.candle_interval == "1h"
        assert cfg.candle_count == 50
        assert cfg.request_timeout_seconds == 30.0
        assert cfg.session_ttl_seconds == 86400
        assert cfg.forex_refresh_seconds == 60.0
        assert cfg.max_upload_bytes == 10 * 1024 * 1024
        assert cfg.log_level == "INFO"
        assert cfg.port == 3000

    def test_overrides(self, monkeypatch, tmp_path):
        _set_required(monkeypatch)
        monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:8000/v1/")
        monkeypatch.setenv("CANDLE_INTERVAL", "4h")
        monkeypatch.setenv("CANDLE_COUNT", "100")
        monkeypatch.setenv("FOREX_REFRESH_SECONDS", "5")
        monkeypatch.setenv("PORT", "8080")
        cfg = _load(tmp_path)
        assert cfg.openai_base_url == "http://localhost:8000/v1"
        assert cfg.candle_interval == "4h"
        assert cfg.candle_count == 100
        assert cfg.forex_refresh_seconds == 5.0
        assert cfg.port == 8080

    def test_missing_twelve_data_key(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        with pytest.raises(ValueError, match="TWELVE_DATA_API_KEY"):
            _load(tmp_path)

    def test_missing_all_named(self, tmp_path):
        with pytest.raises(ValueError, match="OPENAI_API_KEY, TWELVE_DATA_API_KEY"):
            _load(tmp_path)

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "OPENAI_API_KEY=sk-from-file\nTWELVE_DATA_API_KEY=td-from-file\n",
            encoding="utf-8",
        )
        cfg = load_config(env_path=str(env_file))
        assert cfg.openai_api_key == "sk-from-file"
