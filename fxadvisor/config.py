"""FX Advisor — application configuration.

Loads .env variables into a typed config object.
Validates required variables on startup.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


_REQUIRED_VARS = [
    "OPENAI_API_KEY",
    "TWELVE_DATA_API_KEY",
]


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    openai_api_key: str
    twelve_data_api_key: str
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    openai_vision_model: str = "gpt-4o-mini"
    twelve_data_base_url: str = "https://api.twelvedata.com"
    candle_interval: str = "1h"
    candle_count: int = 50
    request_timeout_seconds: float = 30.0
    session_ttl_seconds: int = 86400
    system_prompt_path: str = "data/system_prompt.txt"
    data_dir: str = "data"
    forex_refresh_seconds: float = 60.0
    max_upload_mb: int = 10
    log_level: str = "INFO"
    port: int = 3000

    @property
    def max_upload_bytes(self) -> int:
        """Return the upload size limit in bytes."""
        return self.max_upload_mb * 1024 * 1024


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the missing variable when a
    required variable is absent.
    """
    load_dotenv(dotenv_path=env_path)

    missing = [v for v in _REQUIRED_VARS if not os.environ.get(v)]
    if missing:
        raise ValueError(
            f"Missing required environment variable(s): {', '.join(missing)}"
        )

    return Config(
        openai_api_key=os.environ["OPENAI_API_KEY"],
        twelve_data_api_key=os.environ["TWELVE_DATA_API_KEY"],
        openai_base_url=os.environ.get(
            "OPENAI_BASE_URL", "https://api.openai.com/v1"
        ).rstrip("/"),
        openai_model=os.environ.get("OPENAI_MODEL", "gpt-3.5-turbo"),
        openai_vision_model=os.environ.get("OPENAI_VISION_MODEL", "gpt-4o-mini"),
        twelve_data_base_url=os.environ.get(
            "TWELVE_DATA_BASE_URL", "https://api.twelvedata.com"
        ).rstrip("/"),
        candle_interval=os.environ.get("CANDLE_INTERVAL", "1h"),
        candle_count=int(os.environ.get("CANDLE_COUNT", "50")),
        request_timeout_seconds=float(os.environ.get("REQUEST_TIMEOUT_SECONDS", "30")),
        session_ttl_seconds=int(os.environ.get("SESSION_TTL_SECONDS", "86400")),
        system_prompt_path=os.environ.get("SYSTEM_PROMPT_PATH", "data/system_prompt.txt"),
        data_dir=os.environ.get("DATA_DIR", "data"),
        forex_refresh_seconds=float(os.environ.get("FOREX_REFRESH_SECONDS", "60")),
        max_upload_mb=int(os.environ.get("MAX_UPLOAD_MB", "10")),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        port=int(os.environ.get("PORT", "3000")),
    )
