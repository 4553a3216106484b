"""Tests for environment-driven engine settings."""
from datetime import timedelta

import pytest

from medibook.config import EngineSettings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "CLINIC_TIMEZONE", "REMINDER_LOOKAHEAD_HOURS",
                 "BATCH_MAX_WORKERS", "EVENTS_ENABLED", "PUBSUB_NAME", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)

    settings = EngineSettings.from_env()

    assert settings.clinic_timezone == "UTC"
    assert settings.reminder_lookahead == timedelta(hours=24)
    assert settings.batch_max_workers == 1
    assert settings.events_enabled is False
    assert settings.pubsub_name == "medibook-pubsub"


def test_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://clinic@db/medibook")
    monkeypatch.setenv("CLINIC_TIMEZONE", "Asia/Karachi")
    monkeypatch.setenv("REMINDER_LOOKAHEAD_HOURS", "48")
    monkeypatch.setenv("BATCH_MAX_WORKERS", "8")
    monkeypatch.setenv("EVENTS_ENABLED", "True")

    settings = EngineSettings.from_env()

    assert settings.database_url == "postgresql://clinic@db/medibook"
    assert settings.tz.zone == "Asia/Karachi"
    assert settings.reminder_lookahead == timedelta(hours=48)
    assert settings.batch_max_workers == 8
    assert settings.events_enabled is True


@pytest.mark.parametrize("kwargs", [
    {"clinic_timezone": "Mars/Olympus_Mons"},
    {"batch_max_workers": 0},
    {"reminder_lookahead_hours": 0},
])
def test_invalid_settings_are_rejected(kwargs):
    with pytest.raises(ValueError):
        EngineSettings(**kwargs)
