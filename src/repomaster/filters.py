"""Narrowing filters applied to the collected file set."""

from __future__ import annotations

import fnmatch
import re
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from repomaster.config import DEFAULT_RECENT_DAYS, GREP_READ_LIMIT
from repomaster.content import is_binary, read_bounded
from repomaster.diagnostics import DiagnosticKind, DiagnosticSink
from repomaster.exceptions import InvalidPatternError
from repomaster.gitignore import relative_posix
from repomaster.logging import logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from repomaster.settings import Settings

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class Disabled:
    """No recency filtering."""


@dataclass(frozen=True)
class DefaultDays:
    """Recency filtering with the default window."""

    @property
    def days(self) -> int:
        return DEFAULT_RECENT_DAYS


@dataclass(frozen=True)
class Days:
    """Recency filtering with an explicit window of ``days`` days."""

    days: int

    def __post_init__(self) -> None:
        if self.days < 1:
            msg = f"days must be positive, got {self.days}"
            raise ValueError(msg)


RecentFilter = Disabled | DefaultDays | Days


def parse_recent(value: object) -> RecentFilter:
    """Decide the recency filter once from a raw option value.

    ``None``/``False`` disable it, ``True`` (a bare ``--recent``) selects the
    default window, and a positive integer (or digit string) selects that many
    days. Anything else falls back to the default window.

    Args:
        value (object): the option as given on the command line or in the config file.

    Returns:
        RecentFilter: the decided filter.
    """
    if isinstance(value, Disabled | DefaultDays | Days):
        return value
    if value is None or value is False:
        return Disabled()
    if value is True:
        return DefaultDays()
    try:
        days = int(str(value).strip())
    except ValueError:
        days = 0
    if days >= 1:
        return Days(days)
    logger.warning("recent_days_invalid", value=str(value), fallback=DEFAULT_RECENT_DAYS)
    return DefaultDays()


def keep_matching(
    files: Sequence[Path],
    name: str,
    predicate: Callable[[Path], bool],
    sink: DiagnosticSink | None = None,
) -> list[Path]:
    """Keep files satisfying ``predicate``; an ``OSError`` drops the file with a diagnostic."""
    sink = sink if sink is not None else DiagnosticSink()
    out: list[Path] = []
    for f in files:
        try:
            keep = predicate(f)
        except OSError as e:
            sink.emit(DiagnosticKind.FILTER_FAILED, f, f"{name}: {e}")
            continue
        if keep:
            out.append(f)
    return out


def filter_recent(
    files: Sequence[Path],
    recent: RecentFilter,
    *,
    now: float | None = None,
    sink: DiagnosticSink | None = None,
) -> list[Path]:
    """Keep files modified within the recency window.

    Args:
        files (Sequence[Path]): candidate files.
        recent (RecentFilter): the decided filter; ``Disabled`` keeps everything.
        now (float | None): reference POSIX time. Defaults to the current time.
        sink (DiagnosticSink | None): receives stat failures.

    Returns:
        list[Path]: files whose mtime is strictly after the cutoff.
    """
    if isinstance(recent, Disabled):
        return list(files)
    reference = time.time() if now is None else now
    cutoff = reference - recent.days * SECONDS_PER_DAY
    return keep_matching(files, "recent files", lambda f: f.stat().st_mtime > cutoff, sink)


def compile_grep(pattern: str) -> re.Pattern[str]:
    """Compile a case-insensitive content search expression.

    Raises:
        InvalidPatternError: if ``pattern`` is not a valid regular expression.
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise InvalidPatternError(pattern=pattern, reason=str(e)) from e


def filter_by_content(
    files: Sequence[Path],
    pattern: str | None,
    *,
    read_limit: int = GREP_READ_LIMIT,
    sink: DiagnosticSink | None = None,
) -> list[Path]:
    """Keep text files whose content matches ``pattern`` (case-insensitive).

    Binary files never match. Only the first ``read_limit`` bytes of each file
    are searched.

    Args:
        files (Sequence[Path]): candidate files.
        pattern (str | None): regular expression; empty or None keeps everything.
        read_limit (int): how many leading bytes of each file are searched.
        sink (DiagnosticSink | None): receives read failures.

    Returns:
        list[Path]: the matching files.

    Raises:
        InvalidPatternError: if ``pattern`` does not compile.
    """
    if not pattern:
        return list(files)
    regex = compile_grep(pattern)

    def predicate(f: Path) -> bool:
        data = read_bounded(f, read_limit)[:read_limit]
        if is_binary(data):
            return False
        return regex.search(data.decode("utf-8", errors="replace")) is not None

    return keep_matching(files, "content search", predicate, sink)


def filter_included(files: Sequence[Path], base_dir: Path, include_globs: Sequence[str]) -> list[Path]:
    """Keep files whose relative path or name matches one of ``include_globs``.

    Args:
        files (Sequence[Path]): candidate files.
        base_dir (Path): directory the globs are relative to.
        include_globs (Sequence[str]): ``fnmatch`` patterns; empty keeps everything.

    Returns:
        list[Path]: the included files.
    """
    globs = [g.strip().replace("\\", "/") for g in include_globs if g and g.strip()]
    if not globs:
        return list(files)
    out: list[Path] = []
    for f in files:
        rel = relative_posix(f, base_dir)
        if any(fnmatch.fnmatch(rel, g) or fnmatch.fnmatch(f.name, g) for g in globs):
            out.append(f)
    return out


def filter_valid_relative_paths(files: Sequence[Path], base_dir: Path) -> list[Path]:
    """Keep files strictly inside ``base_dir``."""
    out: list[Path] = []
    for f in files:
        rel = relative_posix(f, base_dir)
        if rel and rel != "." and rel != ".." and not rel.startswith("../"):
            out.append(f)
    return out


def apply_file_filters(
    files: Sequence[Path],
    base_dir: Path,
    settings: Settings,
    *,
    sink: DiagnosticSink | None = None,
) -> list[Path]:
    """Run the recency, content and include filters in that order."""
    sink = sink if sink is not None else DiagnosticSink()
    out = filter_recent(files, settings.recent, sink=sink)
    out = filter_by_content(out, settings.grep, sink=sink)
    return filter_included(out, base_dir, settings.include)
