"""Structured logging for mapissues.

Every mapissues logger lives under the ``mapissues`` stdlib logger, which
owns the handlers, so configuring logging here leaves the host
application's root logger alone:

- console: rich handler on stderr, threshold set by ``-v``
- file: every event as one JSON object per line in
  ``{log_dir}/mapissues.jsonl`` (``--log-dir``)
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import EventDict, Processor, WrappedLogger

LOGGER_NAME = "mapissues"
LOG_FILENAME = "mapissues.jsonl"

_CONSOLE_LEVELS = {0: logging.WARNING, 1: logging.INFO}

_configured = False
_file_handler: logging.FileHandler | None = None


def package_logger() -> logging.Logger:
    """The stdlib logger at the top of the mapissues hierarchy."""
    return logging.getLogger(LOGGER_NAME)


def console_level(verbosity: int) -> int:
    """0 = WARNING, 1 = INFO, 2 or more = DEBUG."""
    return _CONSOLE_LEVELS.get(verbosity, logging.DEBUG)


def _qualified(name: str | None) -> str:
    if not name or name == LOGGER_NAME:
        return LOGGER_NAME
    if name.startswith(LOGGER_NAME + "."):
        return name
    return f"{LOGGER_NAME}.{name}"


def _drop_rendered_meta(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    # Rich prints its own time and level columns.
    event_dict.pop("timestamp", None)
    event_dict.pop("level", None)
    return event_dict


class JSONLFormatter(logging.Formatter):
    """Render a record as one JSON line, flattening structlog key/values."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            fields = {k: v for k, v in record.msg.items() if k not in ("level", "timestamp")}
            entry["message"] = fields.pop("event", "")
            entry.update(fields)
        else:
            entry["message"] = record.getMessage()
        return json.dumps(entry, default=str)


def _console_handler(verbosity: int) -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbosity >= 2,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
        level=console_level(verbosity),
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _drop_rendered_meta,
                structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
            ]
        )
    )
    return handler


def _jsonl_handler(log_dir: Path) -> logging.FileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILENAME, mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(JSONLFormatter())
    return handler


def configure_logging(
    verbosity: int = 0,
    log_to_file: bool = False,
    log_dir: Path | None = None,
) -> None:
    """(Re)configure the mapissues logger hierarchy.

    Args:
        verbosity: Console threshold, see ``console_level``.
        log_to_file: Also write every event, down to DEBUG, as JSONL.
        log_dir: Directory for the JSONL file. Required with log_to_file.

    Raises:
        ValueError: If log_to_file is set without a log_dir.
    """
    global _configured, _file_handler

    if log_to_file and log_dir is None:
        raise ValueError("log_dir is required when log_to_file=True")

    close_file_logging()

    logger = package_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(verbosity))
    if log_to_file and log_dir is not None:
        _file_handler = _jsonl_handler(log_dir)
        logger.addHandler(_file_handler)

    level = logging.DEBUG if (verbosity > 0 or log_to_file) else logging.WARNING
    logger.setLevel(level)
    logger.propagate = False

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger inside the mapissues hierarchy.

    Names outside it are nested under ``mapissues.`` so their events reach
    the package handlers. Logging is configured with defaults on first use.
    """
    if not _configured:
        configure_logging()

    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(_qualified(name))
    return logger


def close_file_logging() -> None:
    """Detach and close the JSONL handler, if one is open."""
    global _file_handler
    if _file_handler is None:
        return
    package_logger().removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None
