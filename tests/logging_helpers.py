from __future__ import annotations

import logging


def console_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if getattr(handler, "_cmdtree_console", False)]
