"""
Structured logging configuration.

Every logger handed out by ``get_logger`` accepts an ``extra_data`` mapping
that ends up as top-level keys of the JSON log line.
"""

import sys
import logging
from typing import Any, Dict
from datetime import datetime, timezone
import json
from pathlib import Path

from .config import settings


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text log formatter"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            pairs = " ".join(f"{k}={v}" for k, v in extra_data.items())
            line = f"{line} [{pairs}]"
        return line


def setup_logging() -> None:
    """Configure application logging"""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    if settings.LOG_FORMAT == "json":
        formatter = StructuredFormatter()
    else:
        formatter = TextFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    handlers = [console_handler]

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True
    )

    # Silence noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger with structured context"""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Move ``extra_data`` onto the record, merged with permanent context"""
        extra_data = kwargs.pop("extra_data", {})

        if "extra" not in kwargs:
            kwargs["extra"] = {}

        kwargs["extra"]["extra_data"] = {
            **self.extra,
            **extra_data
        }

        return msg, kwargs


def get_logger(name: str) -> LoggerAdapter:
    """Get logger accepting ``extra_data``"""
    return LoggerAdapter(logging.getLogger(name), {})


def get_context_logger(name: str, **context) -> LoggerAdapter:
    """Get logger with permanent context"""
    return LoggerAdapter(logging.getLogger(name), context)


# Example usage:
# logger = get_logger(__name__)
# logger.info("Answer submitted", extra_data={"problem_key": "1.1.3", "status": "correct"})
#
# Or with permanent context:
# logger = get_context_logger(__name__, section_id="1.1")
# logger.info("Report built")  # Automatically includes section_id
