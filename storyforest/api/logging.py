"""Structured logging infrastructure for the API layer.

Provides JSON-formatted logging for production and human-readable
logging for development, plus an AudioJobLogger helper for narration jobs.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

# Extra fields copied from log records into the JSON payload
STRUCTURED_FIELDS = ("user_id", "book_id", "voice_id", "job_id", "stage", "duration", "error_type")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in STRUCTURED_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int | str = logging.INFO) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


class AudioJobLogger:
    """Logger for narration job events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("audio_generation")

    def job_started(self, user_id: str, voice_id: str, item_count: int) -> None:
        self.logger.info(
            f"Audio generation started for {item_count} pages",
            extra={"user_id": user_id, "voice_id": voice_id, "stage": "started"},
        )

    def item_failed(self, user_id: str, book_id: str, page_number: int, error: Exception) -> None:
        self.logger.error(
            f"Audio generation failed for page {page_number}: {error}",
            extra={
                "user_id": user_id,
                "book_id": book_id,
                "stage": "page",
                "error_type": type(error).__name__,
            },
        )

    def job_completed(self, user_id: str, success_count: int, fail_count: int, duration: float) -> None:
        self.logger.info(
            f"Audio generation completed: {success_count} succeeded, {fail_count} failed",
            extra={"user_id": user_id, "stage": "completed", "duration": round(duration, 2)},
        )

    def job_failed(self, user_id: str, error: Exception) -> None:
        self.logger.error(
            f"Audio generation failed: {error}",
            extra={"user_id": user_id, "stage": "failed", "error_type": type(error).__name__},
            exc_info=True,
        )

    def cleanup_failed(self, user_id: str, voice_id: Optional[str], error: Exception) -> None:
        self.logger.error(
            f"Voice cleanup failed: {error}",
            extra={
                "user_id": user_id,
                "voice_id": voice_id,
                "stage": "cleanup",
                "error_type": type(error).__name__,
            },
        )


# Global audio job logger instance
audio_logger = AudioJobLogger()
