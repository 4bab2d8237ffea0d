from __future__ import annotations

import io
import logging

from cmdtree.logging_config import setup_logging
from tests.logging_helpers import console_handlers


def test_setup_logging_is_idempotent(bare_logger: logging.Logger) -> None:
    stream = io.StringIO()
    logger = setup_logging(logging.INFO, stream=stream)
    again = setup_logging(logging.DEBUG, stream=stream)
    assert again is logger is bare_logger
    assert len(console_handlers(logger)) == 1
    assert logger.level == logging.DEBUG


def test_setup_logging_formats_records(bare_logger: logging.Logger) -> None:
    stream = io.StringIO()
    setup_logging(logging.INFO, stream=stream)
    logging.getLogger("cmdtree.validate").error("flag %r is broken", "foo,bar")
    line = stream.getvalue().strip()
    assert "ERROR" in line
    assert "[cmdtree.validate]" in line
    assert line.endswith("flag 'foo,bar' is broken")
