from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dayplain_push.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "Dayplain Push Server"
    API_PREFIX: str = ""
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    FRONTEND_URL: str = "http://localhost:3000"

    # Subscriptions, settings and dedup state live here as JSON documents
    DATA_DIR: Path = Path("data")

    # Web Push (VAPID)
    VAPID_PUBLIC_KEY: Optional[str] = None
    VAPID_PRIVATE_KEY: Optional[str] = None
    VAPID_SUBJECT: str = "mailto:admin@dayplain.local"
    PUSH_TIMEOUT_SECONDS: float = 10.0
    PUSH_TTL_SECONDS: int = 86400

    # Background scheduler
    SCHEDULER_ENABLED: bool = True
    REMINDER_CHECK_INTERVAL_SECONDS: float = 60.0
    CLEANUP_INTERVAL_SECONDS: float = 300.0
    # IANA zone name, e.g. "Europe/Berlin". Empty means the process local time.
    TIMEZONE: Optional[str] = None

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[Path] = None

    @field_validator("API_PREFIX")
    @classmethod
    def normalize_prefix(cls, value: str) -> str:
        """Accept "api", "/api" and "/api/" alike."""
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value

    @field_validator("VAPID_PUBLIC_KEY", "VAPID_PRIVATE_KEY", "TIMEZONE", mode="before")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def subscriptions_file(self) -> Path:
        return self.DATA_DIR / "subscriptions.json"

    @property
    def settings_file(self) -> Path:
        return self.DATA_DIR / "settings.json"

    @property
    def state_file(self) -> Path:
        return self.DATA_DIR / "notificationState.json"

    def require_vapid(self) -> None:
        """Refuse to run with push delivery silently disabled."""
        missing = [
            name
            for name in ("VAPID_PUBLIC_KEY", "VAPID_PRIVATE_KEY")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"VAPID keys not configured: {', '.join(missing)}. "
                "Run backend/generate_vapid_keys.py and copy the output to your .env file"
            )


@lru_cache
def get_settings() -> Settings:
    return Settings()
