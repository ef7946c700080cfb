"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest
from rich.logging import RichHandler

import mapissues.observability.logging as log_module
from mapissues.observability import (
    LOGGER_NAME,
    close_file_logging,
    configure_logging,
    get_logger,
)
from mapissues.observability.logging import console_level, package_logger

if TYPE_CHECKING:
    from pathlib import Path


def _console_handler() -> logging.Handler:
    return next(h for h in package_logger().handlers if isinstance(h, RichHandler))


@pytest.fixture(autouse=True)
def reset_file_logging():
    yield
    close_file_logging()


class TestConsole:
    def test_default_is_warning(self) -> None:
        configure_logging(verbosity=0)

        assert package_logger().level == logging.WARNING
        assert _console_handler().level == logging.WARNING

    def test_verbose_opens_package_logger(self) -> None:
        """verbosity=1 lets everything through; the console handler filters to INFO."""
        configure_logging(verbosity=1)

        assert package_logger().level == logging.DEBUG
        assert _console_handler().level == logging.INFO

    @pytest.mark.parametrize(("verbosity", "level"), [(0, 30), (1, 20), (2, 10), (5, 10)])
    def test_console_level(self, verbosity: int, level: int) -> None:
        assert console_level(verbosity) == level

    def test_root_logger_untouched(self) -> None:
        root_handlers = list(logging.getLogger().handlers)

        configure_logging(verbosity=2)

        assert logging.getLogger().handlers == root_handlers
        assert package_logger().propagate is False

    def test_reconfigure_replaces_console_handler(self) -> None:
        configure_logging(verbosity=0)
        configure_logging(verbosity=2)

        consoles = [h for h in package_logger().handlers if isinstance(h, RichHandler)]
        assert len(consoles) == 1


class TestGetLogger:
    def test_auto_configures(self) -> None:
        log_module._configured = False

        logger = get_logger("test")

        assert log_module._configured is True
        assert hasattr(logger, "info")

    @pytest.mark.parametrize(
        ("name", "qualified"),
        [
            (None, "mapissues"),
            ("mapissues", "mapissues"),
            ("mapissues.validation.manager", "mapissues.validation.manager"),
            ("plugin", "mapissues.plugin"),
        ],
    )
    def test_names_nested_under_package(self, name: str | None, qualified: str) -> None:
        assert log_module._qualified(name) == qualified
        assert qualified.split(".")[0] == LOGGER_NAME


class TestFileLogging:
    def test_creates_log_dir(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"

        configure_logging(verbosity=0, log_to_file=True, log_dir=log_dir)

        assert (log_dir / "mapissues.jsonl").exists()
        assert log_module._file_handler in package_logger().handlers

    def test_off_by_default(self, tmp_path: Path) -> None:
        configure_logging(verbosity=0, log_dir=tmp_path / "logs")

        assert not (tmp_path / "logs").exists()
        assert log_module._file_handler is None

    def test_requires_log_dir(self) -> None:
        with pytest.raises(ValueError, match="log_dir is required"):
            configure_logging(verbosity=0, log_to_file=True, log_dir=None)

    def test_reconfiguration_closes_handler(self, tmp_path: Path) -> None:
        configure_logging(verbosity=0, log_to_file=True, log_dir=tmp_path)
        first_handler = log_module._file_handler
        assert first_handler is not None

        configure_logging(verbosity=0, log_to_file=True, log_dir=tmp_path)

        assert first_handler.stream is None or first_handler.stream.closed
        assert first_handler not in package_logger().handlers
        assert log_module._file_handler is not None

    def test_close_detaches_handler(self, tmp_path: Path) -> None:
        configure_logging(verbosity=0, log_to_file=True, log_dir=tmp_path)
        handler = log_module._file_handler

        close_file_logging()

        assert log_module._file_handler is None
        assert handler not in package_logger().handlers

    def test_structlog_context_written_as_fields(self, tmp_path: Path) -> None:
        configure_logging(verbosity=2, log_to_file=True, log_dir=tmp_path)

        logger = get_logger("tests.context")
        logger.info("validation_pass_complete", changes="1 created", issues=3)

        close_file_logging()

        lines = (tmp_path / "mapissues.jsonl").read_text().splitlines()
        entries = [json.loads(line) for line in lines]
        matching = [e for e in entries if e.get("message") == "validation_pass_complete"]
        assert matching, "Log entry with structlog context not found in JSONL"
        assert matching[0]["changes"] == "1 created"
        assert matching[0]["issues"] == 3
        assert matching[0]["level"] == "INFO"
        assert matching[0]["logger"] == "mapissues.tests.context"
