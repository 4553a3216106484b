"""Engine configuration loaded from the environment."""
from dataclasses import dataclass
from datetime import timedelta
import os

import pytz
from dotenv import load_dotenv

# Load environment variables from .env without overriding the platform
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./medibook.db"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class EngineSettings:
    """Settings for the appointment lifecycle engine."""

    database_url: str = DEFAULT_DATABASE_URL
    clinic_timezone: str = "UTC"
    reminder_lookahead_hours: int = 24
    batch_max_workers: int = 1
    events_enabled: bool = False
    pubsub_name: str = "medibook-pubsub"
    environment: str = "development"

    def __post_init__(self):
        if self.reminder_lookahead_hours <= 0:
            raise ValueError("REMINDER_LOOKAHEAD_HOURS must be positive")
        if self.batch_max_workers < 1:
            raise ValueError("BATCH_MAX_WORKERS must be at least 1")
        try:
            pytz.timezone(self.clinic_timezone)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown CLINIC_TIMEZONE: {self.clinic_timezone}") from e

    @property
    def tz(self):
        """pytz timezone used for calendar days and local times of day."""
        return pytz.timezone(self.clinic_timezone)

    @property
    def reminder_lookahead(self) -> timedelta:
        return timedelta(hours=self.reminder_lookahead_hours)

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Build settings from environment variables."""
        return cls(
            database_url=os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            clinic_timezone=os.environ.get("CLINIC_TIMEZONE", "UTC"),
            reminder_lookahead_hours=int(os.environ.get("REMINDER_LOOKAHEAD_HOURS", "24")),
            batch_max_workers=int(os.environ.get("BATCH_MAX_WORKERS", "1")),
            events_enabled=_env_bool("EVENTS_ENABLED", False),
            pubsub_name=os.environ.get("PUBSUB_NAME", "medibook-pubsub"),
            environment=os.environ.get("ENVIRONMENT", "development"),
        )


# Process-wide settings read once at import
settings = EngineSettings.from_env()
