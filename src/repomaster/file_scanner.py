"""Input path expansion into a deterministic, deduplicated file list."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from repomaster.config import DEFAULT_EXCLUDED_DIRS, IGNORE_FILENAME
from repomaster.diagnostics import DiagnosticKind, DiagnosticSink
from repomaster.gitignore import IgnoreRuleSet, find_rule_set, matches, relative_posix

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True)
class CollectorConfig:
    """Knobs for ``collect_files``.

    Attributes:
        use_ignore_rules: Honor the nearest ``.gitignore`` and prune ``excluded_dirs``.
        excluded_dirs: Directory names always pruned when ignore rules are on.
        ignore_filename: Name of the rules file to look for.
    """

    use_ignore_rules: bool = True
    excluded_dirs: frozenset[str] = DEFAULT_EXCLUDED_DIRS
    ignore_filename: str = IGNORE_FILENAME


@dataclass
class _Walk:
    """Mutable state shared by one collection run."""

    config: CollectorConfig
    sink: DiagnosticSink
    rule_set: IgnoreRuleSet | None
    out: list[Path] = field(default_factory=list)
    seen: set[str] = field(default_factory=set)
    active_dirs: set[str] = field(default_factory=set)

    def add(self, path: Path) -> None:
        key = str(path)
        if key not in self.seen:
            self.seen.add(key)
            self.out.append(path)


def rule_set_start_dir(path: Path) -> Path | None:
    """Directory the ignore file search starts from: ``path`` itself or its parent."""
    try:
        return path if path.is_dir() else path.parent
    except OSError:
        return None


def in_excluded_dir(
    path: Path,
    roots: Sequence[Path],
    excluded_dirs: frozenset[str],
    *,
    is_dir: bool = False,
) -> bool:
    """Check if ``path``, seen from any of ``roots``, lies in (or is) an excluded directory."""
    for root in roots:
        parts = relative_posix(path, root).split("/")
        if not is_dir:
            parts = parts[:-1]
        if not parts:
            continue
        if parts[0] != ".." and any(part in excluded_dirs for part in parts):
            return True
    return False


def collect_files(
    input_paths: Sequence[Path | str],
    use_ignore_rules: bool = True,  # noqa: FBT001, FBT002
    *,
    config: CollectorConfig | None = None,
    sink: DiagnosticSink | None = None,
) -> list[Path]:
    """Expand input files and directories into a sorted list of regular files.

    The rule set is searched once, from the first input. Missing inputs,
    unreadable directories and entries that cannot be stated are reported to
    ``sink`` and skipped; none of them aborts the collection.

    Args:
        input_paths (Sequence[Path | str]): absolute paths to files or directories.
        use_ignore_rules (bool): apply ``.gitignore`` rules and built-in exclusions.
        config (CollectorConfig | None): overrides for exclusions and the rules
            file name. ``use_ignore_rules`` wins over ``config.use_ignore_rules``.
        sink (DiagnosticSink | None): receives skip events.

    Returns:
        list[Path]: absolute file paths, deduplicated and sorted by their string form.
            Empty when nothing qualifies.
    """
    base_config = config or CollectorConfig()
    config = CollectorConfig(
        use_ignore_rules=use_ignore_rules,
        excluded_dirs=base_config.excluded_dirs,
        ignore_filename=base_config.ignore_filename,
    )
    sink = sink if sink is not None else DiagnosticSink()
    paths = [Path(os.path.abspath(p)) for p in input_paths]

    rule_set: IgnoreRuleSet | None = None
    if config.use_ignore_rules and paths:
        start_dir = rule_set_start_dir(paths[0])
        if start_dir is not None:
            rule_set = find_rule_set(start_dir, sink, config.ignore_filename)
    # Explicit inputs are checked from the directory holding the first input.
    roots = [paths[0].parent] if paths else []
    if rule_set is not None:
        roots.append(rule_set.base_dir)

    walk = _Walk(config=config, sink=sink, rule_set=rule_set)
    for path in paths:
        try:
            st = path.stat()
        except OSError as e:
            sink.emit(DiagnosticKind.CANNOT_ACCESS, path, e)
            continue

        is_dir = stat.S_ISDIR(st.st_mode)
        if config.use_ignore_rules and in_excluded_dir(path, roots, config.excluded_dirs, is_dir=is_dir):
            sink.emit(DiagnosticKind.EXCLUDED, path)
            continue
        if matches(rule_set, path, is_dir=is_dir):
            sink.emit(DiagnosticKind.GITIGNORED, path)
            continue

        if is_dir:
            _walk_dir(path, walk)
        elif stat.S_ISREG(st.st_mode):
            walk.add(path)

    return sorted(walk.out, key=str)


def _walk_dir(directory: Path, walk: _Walk) -> None:
    real = os.path.realpath(directory)
    # A symlinked directory pointing back at an ancestor would never end.
    if real in walk.active_dirs:
        return
    walk.active_dirs.add(real)
    try:
        _walk_entries(directory, walk)
    finally:
        walk.active_dirs.discard(real)


def _walk_entries(directory: Path, walk: _Walk) -> None:
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        walk.sink.emit(DiagnosticKind.CANNOT_READ_DIR, directory, e)
        return

    use_rules = walk.config.use_ignore_rules
    for entry in entries:
        full = directory / entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
            if not is_dir and not is_file:
                # Symlinks and special files: classify by their target.
                st = os.stat(full)
                is_dir = stat.S_ISDIR(st.st_mode)
                is_file = stat.S_ISREG(st.st_mode)
        except OSError as e:
            walk.sink.emit(DiagnosticKind.CANNOT_STAT, full, e)
            continue

        if use_rules and is_dir and entry.name in walk.config.excluded_dirs:
            continue
        if use_rules and matches(walk.rule_set, full, is_dir=is_dir):
            continue

        if is_dir:
            _walk_dir(full, walk)
        elif is_file:
            walk.add(full)
