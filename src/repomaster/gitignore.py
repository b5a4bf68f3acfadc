"""Nearest-``.gitignore`` discovery and path matching.

A single rule set is active per traversal. It comes from the closest
``.gitignore`` found walking upward from the starting directory, and every
match is evaluated relative to the directory holding that file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pathspec
from pydantic import BaseModel, ConfigDict, Field

from repomaster.config import IGNORE_FILENAME, REPOSITORY_MARKER
from repomaster.diagnostics import DiagnosticKind, DiagnosticSink

if TYPE_CHECKING:
    from collections.abc import Sequence


class IgnoreRuleSet(BaseModel):
    """Compiled ignore patterns anchored at ``base_dir``.

    Attributes:
        base_dir: Directory the patterns are relative to.
        source: The ignore file the patterns were read from.
        patterns: Pattern lines in file order, with the implicit ``.git`` rule last.
        spec: The compiled matcher.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    base_dir: Path = Field(..., description="Directory holding the ignore file")
    source: Path = Field(..., description="Ignore file path")
    patterns: tuple[str, ...] = Field(default=(), description="Pattern lines in order")
    spec: pathspec.GitIgnoreSpec

    @classmethod
    def from_lines(cls, base_dir: Path, lines: Sequence[str], source: Path | None = None) -> IgnoreRuleSet:
        """Compile ``lines`` with git's precedence rules, always excluding ``.git``.

        Raises:
            ValueError: if a pattern is malformed.
        """
        patterns = (*lines, REPOSITORY_MARKER)
        return cls(
            base_dir=base_dir,
            source=source if source is not None else base_dir / IGNORE_FILENAME,
            patterns=patterns,
            spec=pathspec.GitIgnoreSpec.from_lines(patterns),
        )


def load_rule_set(
    directory: Path,
    sink: DiagnosticSink | None = None,
    filename: str = IGNORE_FILENAME,
) -> IgnoreRuleSet | None:
    """Load the ignore file of a single directory.

    Args:
        directory (Path): directory to look into.
        sink (DiagnosticSink | None): receives a diagnostic when the file exists
            but cannot be read or parsed.
        filename (str): ignore file name. Defaults to ``.gitignore``.

    Returns:
        IgnoreRuleSet | None: the compiled rule set, or None when the file is
            missing, unreadable or malformed.
    """
    ignore_path = directory / filename
    if not ignore_path.is_file():
        return None
    try:
        lines = ignore_path.read_text(encoding="utf-8").splitlines()
        return IgnoreRuleSet.from_lines(directory, lines, source=ignore_path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        (sink if sink is not None else DiagnosticSink()).emit(DiagnosticKind.IGNORE_FILE_UNREADABLE, ignore_path, e)
        return None


def find_rule_set(
    start_dir: Path,
    sink: DiagnosticSink | None = None,
    filename: str = IGNORE_FILENAME,
) -> IgnoreRuleSet | None:
    """Find the nearest ignore file by walking up from ``start_dir``.

    The search stops at the first directory holding a usable ignore file, or
    at a repository root (a directory containing ``.git/``), or just below the
    filesystem root.

    Args:
        start_dir (Path): directory to start from.
        sink (DiagnosticSink | None): receives diagnostics for unreadable files.
        filename (str): ignore file name. Defaults to ``.gitignore``.

    Returns:
        IgnoreRuleSet | None: the nearest rule set, or None.
    """
    current = Path(os.path.abspath(start_dir))
    while current.parent != current:
        rule_set = load_rule_set(current, sink, filename)
        if rule_set is not None:
            return rule_set
        if (current / REPOSITORY_MARKER).is_dir():
            return None
        current = current.parent
    return None


def relative_posix(path: Path, base_dir: Path) -> str:
    """Relative path from ``base_dir`` to ``path`` with forward slashes."""
    return os.path.relpath(path, base_dir).replace(os.sep, "/")


def matches(rule_set: IgnoreRuleSet | None, path: Path, *, is_dir: bool = False) -> bool:
    """Check if ``path`` is excluded by ``rule_set``.

    Args:
        rule_set (IgnoreRuleSet | None): the active rule set; None never matches.
        path (Path): absolute path to test.
        is_dir (bool): whether ``path`` is a directory, so directory-only
            patterns (``build/``) apply to it.

    Returns:
        bool: True if the path is ignored. The base directory itself and
            paths outside it are never ignored.
    """
    if rule_set is None:
        return False
    rel = relative_posix(path, rule_set.base_dir)
    if rel == "." or rel == ".." or rel.startswith("../"):
        return False
    if is_dir:
        rel += "/"
    return rule_set.spec.match_file(rel)
