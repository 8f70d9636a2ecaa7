# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Logging configuration for report passes.

Modules log through ``logging.getLogger(__name__)``. setup_logging()
installs one stdlib handler whose records are rendered by structlog:
key/value console lines in development, JSON lines otherwise. Values
bound with log_context() are merged into every record emitted inside
the block, so all lines of a pass carry the activity being reported.

Rendered tables own stdout; log lines go to stderr unless another
stream is given.

Example:
    >>> setup_logging(get_settings())
    >>> with log_context(activity_id=12, group_id=3):
    ...     logger.info("Loaded attempts: sco=%s", 40)
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Optional, TextIO

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from src.core.config.settings import Settings

# Loggers that flood DEBUG output with per-statement noise
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "sqlalchemy.orm")

_handler: Optional[logging.Handler] = None


def _build_formatter(settings: "Settings") -> structlog.stdlib.ProcessorFormatter:
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.is_development or settings.debug:
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=False)]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )


def setup_logging(settings: "Settings", stream: Optional[TextIO] = None) -> logging.Handler:
    """Route application logging through structlog renderers.

    Calling it again replaces the handler installed by the previous call,
    so the host can reconfigure without duplicating lines.

    Args:
        settings: Application settings providing log_level, environment
            and the debug flag.
        stream: Destination of log lines, stderr by default.

    Returns:
        The installed handler.
    """
    global _handler

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_build_formatter(settings))
    handler.setLevel(log_level)

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    _handler = handler

    logging.getLogger("src").setLevel(log_level)
    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    return handler


@contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Bind values to every log record emitted inside the block.

    Values bound before the block are restored when it exits.

    Args:
        **values: Key-value pairs to attach, e.g. activity_id=12.
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield
