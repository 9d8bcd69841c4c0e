"""Tests for prdigest.logging (DigestLogging, level/format from config)."""

import logging
import sys

import pytest

from prdigest.config import LoggingConfig
from prdigest.logging import DEFAULT_FORMAT, LEVELS, DigestLogging, _resolve_level


def _root_handler() -> logging.Handler:
    assert logging.root.handlers
    return logging.root.handlers[0]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        ("  WARNING  ", logging.WARNING),
        ("\terror\t", logging.ERROR),
        ("TRACE", logging.INFO),
        ("", logging.INFO),
    ],
)
def test_resolve_level(name: str, expected: int) -> None:
    """Names are case- and whitespace-insensitive; unknown names mean INFO."""
    assert _resolve_level(name) == expected


def test_setup_sets_root_level_from_config() -> None:
    """setup() sets root logger level from config.level."""
    for level_name, expected_num in LEVELS.items():
        DigestLogging(LoggingConfig(level=level_name, format="%(message)s")).setup()
        assert logging.root.level == expected_num


def test_setup_applies_format() -> None:
    """setup() uses config.format for the root handler."""
    custom = "%(levelname)s || %(message)s"
    DigestLogging(LoggingConfig(level="INFO", format=custom)).setup()
    assert _root_handler().formatter._fmt == custom


def test_empty_format_uses_default() -> None:
    """When config.format is empty, default format is used."""
    DigestLogging(LoggingConfig(level="INFO", format="")).setup()
    assert _root_handler().formatter._fmt == DEFAULT_FORMAT


def test_setup_logs_to_stderr() -> None:
    """Log records go to stderr so stdout carries only the digest."""
    DigestLogging(LoggingConfig()).setup()
    handler = _root_handler()
    assert isinstance(handler, logging.StreamHandler)
    assert handler.stream is sys.stderr
