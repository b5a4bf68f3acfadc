from __future__ import annotations

import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from repomaster.content import SummaryStats

EMPTY_TREE_PLACEHOLDER = "(empty)"


def render_file_section(rel: str, content: str, *, truncated: bool, language: str = "") -> str:
    """Format one file's content as a Markdown section.

    Args:
        rel (str): the path shown in the section header.
        content (str): the decoded (possibly truncated) file text.
        truncated (bool): append a ``[truncated]`` note after the block.
        language (str): code fence language hint, may be empty.

    Returns:
        str: the section text.
    """
    parts = [
        f"\n### File: {rel}\n",
        f"```{language}",
        content,
        "```",
        "\n> [truncated]\n" if truncated else "",
    ]
    return "\n".join(parts)


def build_report(
    base_dir: Path,
    git_section: str,
    tree_text: str,
    sections: Sequence[str],
    stats: SummaryStats,
) -> str:
    """Assemble the full repository context document.

    Args:
        base_dir (Path): the directory the report describes.
        git_section (str): pre-rendered git info bullet lines.
        tree_text (str): rendered directory tree; an empty string is shown as ``(empty)``.
        sections (Sequence[str]): per-file sections, in order.
        stats (SummaryStats): counters for the summary block.

    Returns:
        str: the Markdown document.
    """
    out = io.StringIO()
    out.write("# Repository Context\n\n")
    out.write(f"## File System Location\n{base_dir}\n\n")
    out.write(f"## Git Info\n{git_section}\n\n")
    out.write("## Structure\n```\n")
    out.write(tree_text or EMPTY_TREE_PLACEHOLDER)
    out.write("\n```\n\n")
    out.write("## File Contents\n")
    out.write("\n".join(sections))
    out.write("\n\n## Summary\n")
    out.write(f"- Total files: {stats.total_text_files}\n")
    out.write(f"- Total lines: {stats.total_lines}\n")
    if stats.skipped_binary:
        out.write(f"- Skipped binary files: {stats.skipped_binary}\n")
    if stats.truncated_files:
        out.write(f"- Truncated files: {stats.truncated_files}\n")
    return out.getvalue()
