"""Tests for structured logging."""

import json
import logging

from storyforest.api.logging import AudioJobLogger, JSONFormatter


def _record(msg="hello", **extra):
    record = logging.LogRecord("storyforest.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "storyforest.test"
        assert data["message"] == "hello"
        assert data["timestamp"].endswith("Z")

    def test_copies_narration_extras(self):
        data = json.loads(JSONFormatter().format(_record(user_id="u1", book_id="b1", stage="page")))

        assert data["user_id"] == "u1"
        assert data["book_id"] == "b1"
        assert data["stage"] == "page"

    def test_ignores_unknown_extras(self):
        data = json.loads(JSONFormatter().format(_record(favourite_colour="green")))

        assert "favourite_colour" not in data


class TestAudioJobLogger:
    def test_item_failed_records_error_type(self, caplog):
        job_logger = AudioJobLogger()

        with caplog.at_level(logging.ERROR, logger="audio_generation"):
            job_logger.item_failed("u1", "b1", 3, TimeoutError("slow"))

        record = caplog.records[-1]
        assert record.book_id == "b1"
        assert record.stage == "page"
        assert record.error_type == "TimeoutError"
