"""JSON logging for the ToyRotator backend.

Structured fields are passed as ``extra={"extra_data": {...}}`` and merged
into the emitted record.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

ROOT_LOGGER = "toyrotator"

# Request logs from the OpenAI SDK transport
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = getattr(record, "extra_data", None)
        if isinstance(extra, dict):
            entry.update(extra)

        return json.dumps(entry, default=str)


def configure_logging(debug: bool = False) -> logging.Logger:
    """
    Attach a stdout JSON handler to the ``toyrotator`` logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        debug: Log at DEBUG instead of INFO.

    Returns:
        The package root logger.
    """
    level = logging.DEBUG if debug else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the package root so it shares its handler."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
