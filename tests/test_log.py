"""Tests for logging setup."""
import logging

from rich.console import Console
from rich.logging import RichHandler

from study_coach.log import configure_logging


def _reset_root():
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)


def test_configure_logging_installs_rich_handler():
    console = Console(record=True)
    try:
        configure_logging("debug", console)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)
        assert root.handlers[0].console is console
    finally:
        _reset_root()


def test_configure_logging_unknown_level_falls_back_to_warning():
    try:
        configure_logging("chatty")
        assert logging.getLogger().level == logging.WARNING
    finally:
        _reset_root()
