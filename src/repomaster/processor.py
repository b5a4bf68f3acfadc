"""Run orchestration: collect, filter, render and write the report."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from repomaster.content import read_files_and_summarize
from repomaster.diagnostics import DiagnosticSink
from repomaster.exceptions import InputPathError, NoFilesFoundError, OutputWriteError
from repomaster.file_scanner import collect_files
from repomaster.filters import apply_file_filters, filter_valid_relative_paths
from repomaster.git_info import format_git_section, get_git_info
from repomaster.gitignore import relative_posix
from repomaster.logging import logger
from repomaster.output_construction import build_report
from repomaster.tree_builder import build_tree, render_tree

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO

    from repomaster.settings import Settings


def resolve_inputs(paths: Sequence[Path]) -> tuple[list[Path], Path]:
    """Make inputs absolute and pick the base directory.

    The base directory is the first input if it is a directory, otherwise
    that file's parent.

    Raises:
        InputPathError: if the first input does not exist.

    Returns:
        tuple[list[Path], Path]: the absolute inputs and the base directory.
    """
    abs_paths = [Path(p).resolve() for p in paths]
    first = abs_paths[0]
    if not first.exists():
        raise InputPathError(path=first)
    base_dir = first if first.is_dir() else first.parent
    return abs_paths, base_dir


def process_repository(settings: Settings, *, sink: DiagnosticSink | None = None) -> str:
    """Build the repository context document for ``settings``.

    Args:
        settings (Settings): validated run options.
        sink (DiagnosticSink | None): receives skip events from every stage.

    Raises:
        InputPathError: if the first input path does not exist.
        NoFilesFoundError: if collection yields no file.
        InvalidPatternError: if the content search pattern does not compile.

    Returns:
        str: the Markdown report.
    """
    sink = sink if sink is not None else DiagnosticSink()
    abs_paths, base_dir = resolve_inputs(settings.paths)
    git_section = format_git_section(get_git_info(base_dir))

    files = collect_files(abs_paths, settings.use_gitignore, sink=sink)
    if not files:
        raise NoFilesFoundError
    files = apply_file_filters(files, base_dir, settings, sink=sink)
    logger.info("files_selected", count=len(files), base_dir=str(base_dir))

    tree_rels = [relative_posix(f, base_dir) for f in filter_valid_relative_paths(files, base_dir)]
    tree_text = render_tree(build_tree(tree_rels))

    sections, stats = read_files_and_summarize(
        files,
        base_dir,
        line_numbers=settings.line_numbers,
        sink=sink,
    )
    return build_report(base_dir, git_section, tree_text, sections, stats)


def write_output(content: str, output: Path | None, stream: TextIO | None = None) -> None:
    """Write ``content`` to ``output``, or to ``stream`` (stdout) when no file is given.

    Raises:
        OutputWriteError: if the file cannot be written.
    """
    if output is None:
        (stream or sys.stdout).write(content)
        return
    try:
        output.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(path=output, reason=str(e)) from e
    print(f"Output written to: {output}")


def run(settings: Settings, *, sink: DiagnosticSink | None = None) -> int:
    content = process_repository(settings, sink=sink)
    write_output(content, settings.output)
    return 0
