"""Logging configuration for wikidoc2pod using loguru.

Two output styles are supported on stderr:

* ``text`` (default): human-readable lines for interactive use.
* ``json``: one JSON object per record, for log collectors.

The style and threshold come from the ``LOG_FORMAT`` and ``LOG_LEVEL``
environment variables. Records emitted through the standard :mod:`logging`
module are routed into loguru by :class:`InterceptHandler`.
"""

from __future__ import annotations

import inspect
import json
import logging
import os
import sys
from typing import Any

from loguru import logger

DEFAULT_LOG_FORMAT = "text"
DEFAULT_LOG_LEVEL = "WARNING"

_TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def json_sink(message: Any) -> None:
    """Write a loguru message as a single JSON line to stderr."""
    record = message.record
    extra = dict(record["extra"])
    log_entry = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": extra.pop("name", record["name"]),
        "function": record["function"],
        "line": record["line"],
        "message": record["message"],
    }
    if record["exception"] is not None:
        log_entry["exception"] = str(record["exception"].value)
    log_entry.update(extra)
    sys.stderr.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside of the logging module so loguru reports it.
        frame, depth = inspect.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Install the wikidoc2pod sinks, replacing loguru's default handler.

    Args:
        level: Minimum level to emit. Defaults to ``LOG_LEVEL`` or WARNING.
        fmt: ``"text"`` or ``"json"``. Defaults to ``LOG_FORMAT`` or text.
    """
    log_level = (level or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    log_format = (fmt or os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT)).lower()

    logger.remove()
    logger.configure(extra={"name": "wikidoc2pod"})
    if log_format == "json":
        logger.add(json_sink, level=log_level)
    else:
        logger.add(sys.stderr, format=_TEXT_FORMAT, level=log_level, colorize=None)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.enable("wikidoc2pod")


def get_logger(name: str):
    """Return a loguru logger bound to *name*."""
    return logger.bind(name=name)
