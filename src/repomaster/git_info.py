from __future__ import annotations

import subprocess  # noqa: S404
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from repomaster.logging import logger

if TYPE_CHECKING:
    from pathlib import Path


class GitInfo(BaseModel):
    """Metadata of the ``HEAD`` commit."""

    model_config = ConfigDict(frozen=True)

    commit: str
    branch: str
    author: str
    date: str


def _git(args: list[str], cwd: Path) -> str:
    out = subprocess.run(  # noqa: S603
        ["git", *args],  # noqa: S607
        cwd=str(cwd),
        text=True,
        capture_output=True,
        check=True,
    )
    return out.stdout.strip()


def get_git_info(base_dir: Path) -> GitInfo | None:
    """Look up commit, branch, author and date of ``HEAD`` in ``base_dir``.

    Args:
        base_dir (Path): directory inside the repository.

    Returns:
        GitInfo | None: the commit metadata, or None when git is unavailable,
            ``base_dir`` is not in a repository, or there is no commit yet.
    """
    try:
        commit = _git(["rev-parse", "HEAD"], base_dir)
        branch = _git(["rev-parse", "--abbrev-ref", "HEAD"], base_dir)
        author_name = _git(["show", "-s", "--format=%an", "HEAD"], base_dir)
        author_email = _git(["show", "-s", "--format=%ae", "HEAD"], base_dir)
        date = _git(["show", "-s", "--format=%cd", "HEAD"], base_dir)
    except (OSError, subprocess.CalledProcessError) as e:
        logger.info("git_info_unavailable", path=str(base_dir), error=str(e))
        return None
    return GitInfo(commit=commit, branch=branch, author=f"{author_name} <{author_email}>", date=date)


def format_git_section(info: GitInfo | None) -> str:
    """Render the git info block of the report."""
    if info is None:
        return "- Not a git repository"
    return "\n".join(
        [
            f"- Commit: {info.commit}",
            f"- Branch: {info.branch}",
            f"- Author: {info.author}",
            f"- Date: {info.date}",
        ],
    )
