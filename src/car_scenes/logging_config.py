from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


def resolve_log_format(requested: str, stream: TextIO | None = None) -> str:
    normalized = requested.strip().lower()
    if normalized not in {"auto", "json", "console"}:
        raise ValueError(
            f"Invalid log format '{requested}'. Expected one of ['auto', 'console', 'json']."
        )
    if normalized != "auto":
        return normalized

    out = stream if stream is not None else sys.stderr
    return "console" if getattr(out, "isatty", lambda: False)() else "json"


def configure_logging(
    log_level: str | int, log_format: str, stream: TextIO | None = None
) -> str:
    effective_format = resolve_log_format(log_format, stream=stream)
    raw_level = str(log_level).strip()
    if raw_level.isdigit():
        numeric_level = int(raw_level)
    else:
        numeric_level = logging.getLevelName(raw_level.upper())
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level '{log_level}'.")

    # stdout carries command output (describe JSON), so logs go to stderr.
    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        stream=stream if stream is not None else sys.stderr,
        force=True,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if effective_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.reset_defaults()
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return effective_format


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_event(logger: Any, level: str, event: str, **fields: Any) -> None:
    getattr(logger, level.lower())(event, **fields)
