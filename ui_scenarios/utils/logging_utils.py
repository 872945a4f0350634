"""Central logging configuration using Loguru JSON sinks."""

from __future__ import annotations

import logging
import sys

from loguru import logger as loguru_logger

# Structured fields that ActionLog and the runner attach via ``extra=``.
STRUCTURED_FIELDS = ("step", "params", "page", "scenario")


class InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping structured extras."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        bound = {field: getattr(record, field) for field in STRUCTURED_FIELDS if hasattr(record, field)}
        loguru_logger.bind(logger_name=record.name, **bound).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_json_logging(level: str = "INFO") -> None:
    """Route stdlib logging through a serialized (JSON) loguru stderr sink."""
    loguru_logger.remove()
    loguru_logger.add(
        sys.stderr,
        level=level.upper(),
        serialize=True,
        enqueue=False,
        backtrace=False,
        diagnose=False,
    )
    logging.basicConfig(
        handlers=[InterceptHandler()],
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
