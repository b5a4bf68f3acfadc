"""Side channel for non-fatal skip events.

Core components never print. They report every skipped path to a
``DiagnosticSink``, which keeps the events for inspection and forwards them
to the structlog logger (stderr or the log file).
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from repomaster.logging import logger as default_logger

if TYPE_CHECKING:
    from pathlib import Path

    import structlog


class DiagnosticKind(StrEnum):
    """What kind of skip event happened."""

    CANNOT_ACCESS = "cannot_access"
    CANNOT_READ_DIR = "cannot_read_dir"
    CANNOT_STAT = "cannot_stat"
    CANNOT_READ_FILE = "cannot_read_file"
    IGNORE_FILE_UNREADABLE = "ignore_file_unreadable"
    GITIGNORED = "gitignored"
    EXCLUDED = "excluded"
    FILTER_FAILED = "filter_failed"


class Diagnostic(BaseModel):
    """A single skip event."""

    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    path: str = Field(..., description="Path that was skipped")
    message: str = Field(default="", description="Underlying error text, if any")


class DiagnosticSink:
    """Collects diagnostics and mirrors them to a structured logger."""

    def __init__(self, logger: structlog.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else default_logger
        self.events: list[Diagnostic] = []

    def emit(self, kind: DiagnosticKind, path: Path | str, error: BaseException | str = "") -> None:
        event = Diagnostic(kind=kind, path=str(path), message=str(error))
        self.events.append(event)
        if kind in {DiagnosticKind.GITIGNORED, DiagnosticKind.EXCLUDED}:
            self._logger.info(kind.value, path=event.path)
        else:
            self._logger.warning(kind.value, path=event.path, error=event.message)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [event for event in self.events if event.kind is kind]
