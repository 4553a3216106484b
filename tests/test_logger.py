"""Tests for the structured logger."""
import json
import logging

from medibook.utils.logger import get_logger


def test_bound_context_is_stamped_on_every_record(caplog):
    logger = get_logger("medibook.tests.logger").bind(batch="appointment-reminders")

    with caplog.at_level(logging.INFO, logger="medibook.tests.logger"):
        logger.info("Batch started", candidates=3)

    record = json.loads(caplog.records[-1].getMessage())
    assert record["message"] == "Batch started"
    assert record["batch"] == "appointment-reminders"
    assert record["candidates"] == 3
    assert record["level"] == "INFO"


def test_non_json_values_are_rendered_as_strings(caplog, clock):
    logger = get_logger("medibook.tests.logger")

    with caplog.at_level(logging.INFO, logger="medibook.tests.logger"):
        logger.info("Tick", now=clock.now())

    assert json.loads(caplog.records[-1].getMessage())["now"].startswith("2026-10-18")
