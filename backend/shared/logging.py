"""Logging for the stats server and the operator scripts.

Stats code logs structlog key/value events. They are handed to stdlib
logging and rendered per handler by a ProcessorFormatter, so pytest's
caplog sees them too. StatsSession binds match_id in structlog
contextvars; every event logged while a match is open carries it.

Environment variables:
- LOG_FORMAT: "json" for one JSON object per line, "console" or unset for
  human-readable output.
- LOG_LEVEL: a stdlib level name, INFO when unset.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FORMATS = ("console", "json")


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Log colors, winners and radar axes by their value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_structlog() -> None:
    """Route structlog events into stdlib logging."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _serialize_enums,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            # exc_info is rendered by each handler's formatter
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _log_format() -> str:
    value = os.environ.get("LOG_FORMAT", "").lower() or "console"
    if value not in LOG_FORMATS:
        msg = f"Invalid LOG_FORMAT={value!r}. Must be one of {', '.join(LOG_FORMATS)}."
        raise ValueError(msg)
    return value


def _log_level() -> int:
    value = os.environ.get("LOG_LEVEL", "INFO").upper()
    levels = logging.getLevelNamesMapping()
    if value not in levels:
        msg = f"Invalid LOG_LEVEL={value!r}."
        raise ValueError(msg)
    return levels[value]


def _formatter(log_format: str, *, colors: bool) -> logging.Formatter:
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def setup_logging(log_dir: Path | str | None = None, level: int | None = None) -> Path | None:
    """Configure logging to stdout and, with log_dir, to a new file there.

    The file is named after the UTC start time, e.g.
    ``stats-20260301T180000Z.log``. Returns its path, or None without log_dir.
    An explicit level overrides LOG_LEVEL.
    """
    log_format = _log_format()
    if level is None:
        level = _log_level()
    configure_structlog()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(_formatter(log_format, colors=sys.stdout.isatty()))
    root.addHandler(stdout_handler)

    if log_dir is None:
        return None

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    file_path = log_path / f"stats-{datetime.now(tz=UTC):%Y%m%dT%H%M%SZ}.log"
    file_handler = logging.FileHandler(file_path, encoding="utf-8")
    file_handler.setFormatter(_formatter(log_format, colors=False))
    root.addHandler(file_handler)
    return file_path
