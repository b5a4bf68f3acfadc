"""Binary detection, bounded decoding and per-file summaries."""

from __future__ import annotations

import os
import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from repomaster.config import BINARY_SAMPLE_SIZE, BINARY_SUSPICIOUS_RATIO, MAX_FILE_SIZE, guess_language
from repomaster.diagnostics import DiagnosticKind, DiagnosticSink
from repomaster.output_construction import render_file_section

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

_LINE_BREAK = re.compile(r"\r?\n")
_TEXT_CONTROL_BYTES = frozenset({9, 10, 13})


class RenderedContent(BaseModel):
    """Decoded (possibly truncated) file text."""

    model_config = ConfigDict(frozen=True)

    content: str
    truncated: bool = False
    line_count: int = Field(..., ge=1)


class ClassifiedContent(BaseModel):
    """Classification of one file: binary, or its rendered text."""

    model_config = ConfigDict(frozen=True)

    is_binary: bool
    content: str = ""
    truncated: bool = False
    line_count: int = 0


class SummaryStats(BaseModel):
    """Aggregate counters reported at the end of the document."""

    total_text_files: int = 0
    total_lines: int = 0
    skipped_binary: int = 0
    truncated_files: int = 0


def is_binary(data: bytes) -> bool:
    """Heuristically decide whether ``data`` is binary.

    Only the first 8000 bytes are sampled. A NUL byte means binary; otherwise
    the sample is binary when more than 30% of it falls outside tab, LF, CR and
    printable ASCII. This is not format aware: text in multi-byte encodings
    with many high-bit bytes can be reported as binary.

    Args:
        data (bytes): raw file content (or a prefix of it).

    Returns:
        bool: True if the content looks binary. Empty input is never binary.
    """
    sample = data[:BINARY_SAMPLE_SIZE]
    if not sample:
        return False
    if 0 in sample:
        return True
    suspicious = sum(1 for b in sample if b not in _TEXT_CONTROL_BYTES and (b < 32 or b > 126))  # noqa: PLR2004
    return suspicious / len(sample) > BINARY_SUSPICIOUS_RATIO


def count_lines(text: str) -> int:
    r"""Count segments split on ``\n`` or ``\r\n``.

    A trailing terminator produces an extra empty segment which is counted,
    so ``"a\n"`` has 2 lines.
    """
    return len(_LINE_BREAK.split(text))


def render_content(data: bytes, max_bytes: int = MAX_FILE_SIZE) -> RenderedContent:
    """Decode ``data`` as UTF-8, keeping at most ``max_bytes`` bytes.

    Invalid sequences are replaced rather than reported.

    Args:
        data (bytes): raw file content.
        max_bytes (int): decoding budget. Defaults to 16 KiB.

    Returns:
        RenderedContent: the text, whether it was cut, and its line count
            computed over the kept prefix only.
    """
    truncated = len(data) > max_bytes
    if truncated:
        data = data[:max_bytes]
    content = data.decode("utf-8", errors="replace")
    return RenderedContent(content=content, truncated=truncated, line_count=count_lines(content))


def classify_bytes(data: bytes, max_bytes: int = MAX_FILE_SIZE) -> ClassifiedContent:
    if is_binary(data):
        return ClassifiedContent(is_binary=True)
    rendered = render_content(data, max_bytes)
    return ClassifiedContent(
        is_binary=False,
        content=rendered.content,
        truncated=rendered.truncated,
        line_count=rendered.line_count,
    )


def read_bounded(path: Path, limit: int = MAX_FILE_SIZE) -> bytes:
    """Read at most ``limit + 1`` bytes, enough to tell whether the file exceeds ``limit``.

    Raises:
        OSError: if the file cannot be opened or read.
    """
    with path.open("rb") as f:
        return f.read(limit + 1)


def number_lines(text: str) -> str:
    """Prefix every line of ``text`` with its right-aligned line number."""
    lines = _LINE_BREAK.split(text)
    width = len(str(len(lines)))
    return "\n".join(f"{i:>{width}} | {line}" for i, line in enumerate(lines, start=1))


def display_path(path: Path, base_dir: Path) -> str:
    """Forward-slash path of ``path`` relative to ``base_dir``, or its name when they coincide."""
    rel = os.path.relpath(path, base_dir).replace(os.sep, "/")
    return path.name if rel == "." else rel


def read_files_and_summarize(
    files: Sequence[Path],
    base_dir: Path,
    *,
    line_numbers: bool = False,
    max_bytes: int = MAX_FILE_SIZE,
    sink: DiagnosticSink | None = None,
) -> tuple[list[str], SummaryStats]:
    """Render a Markdown section for every text file and count what was seen.

    Binary files produce no section and are only counted. Unreadable files are
    reported to ``sink`` and skipped.

    Args:
        files (Sequence[Path]): absolute paths, in output order.
        base_dir (Path): directory section headers are relative to.
        line_numbers (bool): prefix content lines with their numbers.
        max_bytes (int): per-file decoding budget.
        sink (DiagnosticSink | None): receives read failures.

    Returns:
        tuple[list[str], SummaryStats]: the sections and the aggregate counters.
    """
    sink = sink if sink is not None else DiagnosticSink()
    stats = SummaryStats()
    sections: list[str] = []
    for file in files:
        try:
            data = read_bounded(file, max_bytes)
        except OSError as e:
            sink.emit(DiagnosticKind.CANNOT_READ_FILE, file, e)
            continue

        classified = classify_bytes(data, max_bytes)
        if classified.is_binary:
            stats.skipped_binary += 1
            continue
        if classified.truncated:
            stats.truncated_files += 1
        stats.total_text_files += 1
        stats.total_lines += classified.line_count

        body = number_lines(classified.content) if line_numbers else classified.content
        sections.append(
            render_file_section(
                display_path(file, base_dir),
                body,
                truncated=classified.truncated,
                language=guess_language(file),
            ),
        )
    return sections, stats
