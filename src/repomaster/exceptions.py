from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RepomasterError(Exception):
    """Base exception for fatal repomaster errors."""

    def __str__(self) -> str:
        return getattr(self, "message", self.__class__.__name__)


@dataclass(frozen=True)
class InputPathError(RepomasterError):
    """Raised when the first input path, which anchors the report, does not exist."""

    path: Path
    message: str = "Path does not exist."

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


@dataclass(frozen=True)
class NoFilesFoundError(RepomasterError):
    """Raised when collection and filtering leave no file to report."""

    message: str = "No valid files found."


@dataclass(frozen=True)
class InvalidPatternError(RepomasterError):
    """Raised when a content search expression does not compile."""

    pattern: str
    reason: str

    def __str__(self) -> str:
        return f"Invalid search pattern {self.pattern!r}: {self.reason}"


@dataclass(frozen=True)
class OutputWriteError(RepomasterError):
    """Raised when the report cannot be written to the requested file."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Error writing to file {self.path}: {self.reason}"
