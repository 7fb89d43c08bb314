"""Logging setup shared by the API server and the CLI.

JSON lines in production, plain text for local runs. StoryLogger emits the
generation lifecycle events (started, rejected, failed, completed) with
structured fields and never the request text itself.
"""

import json
import logging
import sys
from datetime import datetime, timezone

# Structured fields copied from `extra=` into the JSON payload
EXTRA_FIELDS = ("story_id", "stage", "duration", "client_ip", "error_type", "image_count")

# Third-party loggers kept at WARNING or above
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "LiteLLM")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Install a single stderr handler on the root logger."""
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

    # SDK request logs would otherwise drown the generation events
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


class StoryLogger:
    """Logger for story generation events with structured fields.

    Never logs request contents, only their sizes.
    """

    def __init__(self):
        self.logger = logging.getLogger("story_generation")

    def generation_started(self, client_ip: str, concept_length: int) -> None:
        self.logger.info(
            f"Story generation started (concept length: {concept_length})",
            extra={"client_ip": client_ip, "stage": "started"},
        )

    def generation_completed(self, client_ip: str, duration: float, image_count: int) -> None:
        self.logger.info(
            "Story generation completed",
            extra={
                "client_ip": client_ip,
                "stage": "completed",
                "duration": round(duration, 2),
                "image_count": image_count,
            },
        )

    def generation_rejected(self, client_ip: str, stage: str, error: Exception) -> None:
        self.logger.warning(
            f"Story request rejected at {stage}: {error}",
            extra={"client_ip": client_ip, "stage": stage, "error_type": type(error).__name__},
        )

    def generation_failed(self, client_ip: str, error: Exception) -> None:
        self.logger.error(
            f"Story generation failed: {error}",
            extra={"client_ip": client_ip, "stage": "failed", "error_type": type(error).__name__},
            exc_info=True,
        )

    def persistence_failed(self, operation: str, error: Exception, story_id: str | None = None) -> None:
        extra = {"stage": operation, "error_type": type(error).__name__}
        if story_id:
            extra["story_id"] = story_id
        self.logger.error(f"Story log {operation} failed: {error}", extra=extra)


# Global story logger instance
story_logger = StoryLogger()
