from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


import click
import pytest
from click.testing import CliRunner

from cmdtree.logging_config import ROOT_LOGGER_NAME
from cmdtree.settings import Settings
from tests.logging_helpers import console_handlers


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def settings() -> Settings:
    return Settings(app_path="/opt/app/bin/app")


@pytest.fixture
def recorder():
    """Callbacks that remember the context they ran in."""
    calls: list[tuple[str, click.Context, dict[str, object]]] = []

    def _make(name: str):
        def _callback(**kwargs: object) -> None:
            calls.append((name, click.get_current_context(), dict(kwargs)))
            click.echo(f"ran {name}")

        return _callback

    _make.calls = calls  # type: ignore[attr-defined]
    return _make


@pytest.fixture
def bare_logger():
    """The cmdtree logger without console handlers; anything added is dropped afterwards."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    previous = console_handlers(logger)
    previous_level = logger.level
    for handler in previous:
        logger.removeHandler(handler)
    yield logger
    for handler in console_handlers(logger):
        logger.removeHandler(handler)
    for handler in previous:
        logger.addHandler(handler)
    logger.setLevel(previous_level)
