"""Structured logging for repomaster.

Every record is a single JSON line carrying an event name and key/value
context, for example ``{"event": "cannot_read_dir", "path": ..., "error": ...}``.
Skip events come from ``DiagnosticSink``; run-level events (``files_selected``,
``git_info_unavailable``, ``fatal``) are logged by the modules themselves.

Logs go to stderr by default, or to the file given with ``--log-file``.
Stdout carries the report only.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_LOGGING_CONFIGURED = False
_handler: logging.Handler | None = None


def _install_handler(handler: logging.Handler) -> None:
    """Route root log records to ``handler``, replacing the one installed before it."""
    global _handler  # noqa: PLW0603
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
        _handler.close()
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    _handler = handler


def setup_logging(filename: str | Path | None = None) -> structlog.BoundLogger:
    """Set up structured logging for repomaster.

    The first call installs a stderr handler and configures structlog. A call
    with ``filename`` (the CLI does this for ``--log-file``) moves output to
    that file; later calls without a file leave the current destination alone.

    Args:
        filename: Optional path to a log file.

    Returns:
        A structlog logger bound to the ``repomaster`` name.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if filename:
        _install_handler(logging.FileHandler(str(filename), encoding="utf-8"))
    elif _handler is None:
        _install_handler(logging.StreamHandler(sys.stderr))

    if not _LOGGING_CONFIGURED:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_CONFIGURED = True

    return structlog.get_logger("repomaster")


logger = setup_logging()
