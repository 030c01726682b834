"""
Configuration for the operator console.

Values come from, in order of precedence: keyword arguments, environment
variables prefixed STORE_CONSOLE_ (e.g. STORE_CONSOLE_POLL_INTERVAL_SECONDS),
a .env file in the working directory, then the defaults below.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.sounds import DEFAULT_SOUNDS

_REPO_ROOT = Path(__file__).resolve().parents[1]


class ConsoleSettings(BaseSettings):
    """Settings for one console process."""

    data_dir: Path = Field(default=_REPO_ROOT / "data")

    # Change detection and toasts
    poll_interval_seconds: float = Field(default=10.0, gt=0)
    default_ttl_ms: int = Field(default=5000, gt=0)
    detector_ttl_ms: int = Field(default=8000, gt=0)
    sounds: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SOUNDS))
    muted: bool = False

    # Tracking API
    tracking_api_url: str = "http://127.0.0.1:8000"
    tracking_api_timeout: float = Field(default=10.0, gt=0)
    admin_token: Optional[str] = None
    admin_token_ttl_hours: float = Field(default=24, gt=0)

    # Shipments leave from the store's own city
    origin_city: str = "Sapiranga"
    origin_state: str = "RS"

    operator_name: str = "Admin"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="STORE_CONSOLE_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


_settings: Optional[ConsoleSettings] = None


def get_settings() -> ConsoleSettings:
    """Get the process-wide settings singleton."""
    global _settings
    if _settings is None:
        _settings = ConsoleSettings()
    return _settings


def reset_settings(settings: Optional[ConsoleSettings] = None) -> Optional[ConsoleSettings]:
    """Replace the settings singleton (useful for testing)."""
    global _settings
    _settings = settings
    return _settings
