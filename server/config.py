"""Configuration management for the form relay service."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


def _load_env_file() -> None:
    """Load .env from root directory if present."""
    env_path = Path(__file__).parent.parent / ".env"
    if not env_path.is_file():
        return
    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#") and "=" in stripped:
            key, value = stripped.split("=", 1)
            key, value = key.strip(), value.strip().strip("'\"")
            if key and value and key not in os.environ:
                os.environ[key] = value


_load_env_file()


DEFAULT_APP_NAME = "DM Tours Backend API"
DEFAULT_APP_VERSION = "0.1.0"
DEFAULT_RECIPIENTS = "94771461925,94778808689"


def _env(name: str, fallback: Optional[str] = None):
    return lambda: os.getenv(name, fallback)


def _env_int(name: str, fallback: int):
    def _read() -> int:
        try:
            return int(os.getenv(name, str(fallback)))
        except (TypeError, ValueError):
            return fallback

    return _read


def _env_float(name: str, fallback: float):
    def _read() -> float:
        try:
            return float(os.getenv(name, str(fallback)))
        except (TypeError, ValueError):
            return fallback

    return _read


def _env_flag(name: str, fallback: str = "1"):
    return lambda: os.getenv(name, fallback) not in {"0", "false", "False", ""}


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    """Application settings read from environment variables."""

    # App metadata
    app_name: str = Field(default=DEFAULT_APP_NAME)
    app_version: str = Field(default=DEFAULT_APP_VERSION)

    # Server runtime
    server_host: str = Field(default_factory=_env("APP_HOST", "0.0.0.0"))
    server_port: int = Field(default_factory=_env_int("APP_PORT", 3057))

    # Environment
    env: str = Field(default_factory=_env("ENV", "dev"))
    log_level: str = Field(default_factory=_env("LOG_LEVEL", "INFO"))

    # HTTP behaviour
    cors_allow_origins_raw: str = Field(default_factory=_env("CORS_ORIGINS", "*"))
    enable_docs: bool = Field(default_factory=_env_flag("ENABLE_DOCS"))
    docs_url: Optional[str] = Field(default_factory=_env("DOCS_URL", "/docs"))

    # WhatsApp bridge
    whatsapp_provider: str = Field(default_factory=_env("WHATSAPP_PROVIDER", "whatsapp"))
    whatsapp_bridge_url: str = Field(
        default_factory=_env("WHATSAPP_BRIDGE_URL", "http://localhost:3000")
    )
    whatsapp_session: str = Field(default_factory=_env("WHATSAPP_SESSION", "default"))
    whatsapp_api_key: Optional[str] = Field(default_factory=_env("WHATSAPP_API_KEY"))
    whatsapp_webhook_secret: Optional[str] = Field(default_factory=_env("WHATSAPP_WEBHOOK_SECRET"))
    whatsapp_autostart: bool = Field(default_factory=_env_flag("WHATSAPP_AUTOSTART"))
    # Seconds
    whatsapp_ready_timeout: float = Field(default_factory=_env_float("WHATSAPP_READY_TIMEOUT", 30.0))
    whatsapp_poll_interval: float = Field(default_factory=_env_float("WHATSAPP_POLL_INTERVAL", 0.5))
    whatsapp_status_interval: float = Field(
        default_factory=_env_float("WHATSAPP_STATUS_INTERVAL", 5.0)
    )

    # Notification routing
    notify_recipients_raw: str = Field(default_factory=_env("NOTIFY_RECIPIENTS", DEFAULT_RECIPIENTS))
    default_country_code: str = Field(default_factory=_env("DEFAULT_COUNTRY_CODE", "94"))

    # reCAPTCHA
    recaptcha_secret_key: Optional[str] = Field(default_factory=_env("RECAPTCHA_SECRET_KEY"))
    recaptcha_min_score: float = Field(default_factory=_env_float("RECAPTCHA_MIN_SCORE", 0.5))
    recaptcha_verify_url: str = Field(
        default_factory=_env(
            "RECAPTCHA_VERIFY_URL", "https://www.google.com/recaptcha/api/siteverify"
        )
    )

    @property
    def cors_allow_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_allow_origins_raw.strip() in {"", "*"}:
            return ["*"]
        return _split_csv(self.cors_allow_origins_raw)

    @property
    def notify_recipients(self) -> List[str]:
        """Staff numbers that receive contact form and lead notifications."""
        return _split_csv(self.notify_recipients_raw)

    @property
    def captcha_enabled(self) -> bool:
        return bool(self.recaptcha_secret_key)

    @property
    def resolved_docs_url(self) -> Optional[str]:
        """Return documentation URL when docs are enabled."""
        return (self.docs_url or "/docs") if self.enable_docs else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
