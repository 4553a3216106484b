"""Tests for review prompt dispatch."""
from datetime import datetime, timedelta, timezone

import pytz

from medibook.config import EngineSettings
from medibook.models.appointment import AppointmentStatus
from medibook.models.notification import NotificationKind
from medibook.services.clock import FixedClock
from medibook.services.lifecycle_engine import LifecycleEngine
from medibook.services.review_prompt_dispatcher import previous_day_window

COMPLETED = AppointmentStatus.COMPLETED

# NOW is 2026-10-18 10:00 UTC, so today's midnight is NOW - 10h
TODAY_START = timedelta(hours=-10)
YESTERDAY_START = timedelta(hours=-34)


def test_previous_day_window_utc():
    now = datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)

    start, end = previous_day_window(now, pytz.utc)

    assert start == datetime(2026, 10, 17, 0, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 10, 18, 0, 0, tzinfo=timezone.utc)


def test_previous_day_window_follows_clinic_timezone():
    # 02:00 UTC on the 18th is still the evening of the 17th in New York (EDT, UTC-4)
    now = datetime(2026, 10, 18, 2, 0, tzinfo=timezone.utc)

    start, end = previous_day_window(now, pytz.timezone("America/New_York"))

    assert start == datetime(2026, 10, 16, 4, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 10, 17, 4, 0, tzinfo=timezone.utc)


def test_previous_day_window_across_dst_change():
    # 2026-11-01 is the US fall-back day, 25 hours long in New York
    now = datetime(2026, 11, 2, 15, 0, tzinfo=timezone.utc)

    start, end = previous_day_window(now, pytz.timezone("America/New_York"))

    assert start == datetime(2026, 11, 1, 4, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 11, 2, 5, 0, tzinfo=timezone.utc)
    assert end - start == timedelta(hours=25)


def test_day_boundaries(engine, appointments, notifications, make_appointment):
    last_second = appointments.add(make_appointment(TODAY_START - timedelta(seconds=1), status=COMPLETED))
    first_second = appointments.add(make_appointment(YESTERDAY_START, status=COMPLETED))
    today_midnight = appointments.add(make_appointment(TODAY_START, status=COMPLETED))
    two_days_ago = appointments.add(make_appointment(YESTERDAY_START - timedelta(seconds=1), status=COMPLETED))

    result = engine.dispatch_review_prompts()

    prompted = {n.related_entity_id for n in notifications.for_kind(NotificationKind.REVIEW_PROMPT)}
    assert prompted == {last_second.id, first_second.id}
    assert today_midnight.id not in prompted
    assert two_days_ago.id not in prompted
    assert result.attempted == 2 and result.applied == 2


def test_only_completed_appointments_are_prompted(engine, appointments, notifications, make_appointment):
    appointments.add(make_appointment(timedelta(hours=-20), status=AppointmentStatus.MISSED))
    appointments.add(make_appointment(timedelta(hours=-20), status=AppointmentStatus.CANCELLED))
    appointments.add(make_appointment(timedelta(hours=-20), status=AppointmentStatus.CONFIRMED))

    result = engine.dispatch_review_prompts()

    assert result.attempted == 0
    assert notifications.all() == []


def test_review_prompt_content(engine, appointments, notifications, metrics, make_appointment):
    appointment = appointments.add(make_appointment(timedelta(hours=-20), status=COMPLETED, patient_id="patient-9"))

    engine.dispatch_review_prompts()

    prompt = notifications.all()[0]
    assert prompt.kind == NotificationKind.REVIEW_PROMPT
    assert prompt.recipient_id == "patient-9"
    assert prompt.related_entity_id == appointment.id
    assert prompt.title == "How was your appointment?"
    assert "Dr. Sarah Khan" in prompt.message
    assert metrics.metrics["review_prompts_created_total"] == 1


def test_repeated_runs_prompt_once(engine, appointments, notifications, make_appointment):
    appointments.add(make_appointment(timedelta(hours=-15), status=COMPLETED))

    first = engine.dispatch_review_prompts()
    second = engine.dispatch_review_prompts()

    assert first.applied == 1
    assert second.succeeded == second.attempted == 1
    assert second.skipped == 1
    assert len(notifications.all()) == 1


def test_next_day_run_does_not_match_again(engine, appointments, notifications, clock, make_appointment):
    appointments.add(make_appointment(timedelta(hours=-15), status=COMPLETED))
    engine.dispatch_review_prompts()

    clock.advance(days=1)
    result = engine.dispatch_review_prompts()

    assert result.attempted == 0
    assert len(notifications.all()) == 1


def test_clinic_timezone_defines_yesterday(appointments, notifications, metrics, make_appointment):
    # Clock at 2026-10-18 02:00 UTC = 2026-10-17 22:00 in New York
    clock = FixedClock(datetime(2026, 10, 18, 2, 0, tzinfo=timezone.utc))
    engine = LifecycleEngine(
        appointments, notifications, clock=clock,
        settings=EngineSettings(clinic_timezone="America/New_York"), metrics=metrics,
    )
    # 2026-10-16 15:00 New York time, the previous local day
    prior_day = appointments.add(make_appointment(timedelta(hours=-39), status=COMPLETED))
    # 2026-10-17 09:00 New York time: "today" locally, "yesterday" in UTC
    same_day = appointments.add(make_appointment(timedelta(hours=-21), status=COMPLETED))

    engine.dispatch_review_prompts()

    prompted = {n.related_entity_id for n in notifications.all()}
    assert prompted == {prior_day.id}
    assert same_day.id not in prompted
