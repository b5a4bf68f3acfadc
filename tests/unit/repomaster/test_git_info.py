from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

import pytest

from repomaster import git_info
from repomaster.git_info import GitInfo, format_git_section, get_git_info

if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


@pytest.mark.unit
def test_get_git_info_collects_head_metadata(tmp_path: Path, mocker: MockerFixture) -> None:
    answers = {
        ("rev-parse", "HEAD"): "a" * 40,
        ("rev-parse", "--abbrev-ref", "HEAD"): "main",
        ("show", "-s", "--format=%an", "HEAD"): "Ada Lovelace",
        ("show", "-s", "--format=%ae", "HEAD"): "ada@example.com",
        ("show", "-s", "--format=%cd", "HEAD"): "Mon Jan 1 00:00:00 2024 +0000",
    }
    mocker.patch.object(git_info, "_git", side_effect=lambda args, cwd: answers[tuple(args)])

    info = get_git_info(tmp_path)

    assert info == GitInfo(
        commit="a" * 40,
        branch="main",
        author="Ada Lovelace <ada@example.com>",
        date="Mon Jan 1 00:00:00 2024 +0000",
    )


@pytest.mark.unit
def test_get_git_info_returns_none_when_git_fails(tmp_path: Path, mocker: MockerFixture) -> None:
    mocker.patch.object(
        git_info,
        "_git",
        side_effect=subprocess.CalledProcessError(128, ["git", "rev-parse", "HEAD"]),
    )

    assert get_git_info(tmp_path) is None


@pytest.mark.unit
def test_get_git_info_returns_none_without_git_binary(tmp_path: Path, mocker: MockerFixture) -> None:
    mocker.patch.object(git_info.subprocess, "run", side_effect=FileNotFoundError("git"))

    assert get_git_info(tmp_path) is None


@pytest.mark.unit
def test_format_git_section() -> None:
    info = GitInfo(commit="abc", branch="main", author="A <a@b.c>", date="today")

    assert format_git_section(info) == "- Commit: abc\n- Branch: main\n- Author: A <a@b.c>\n- Date: today"
    assert format_git_section(None) == "- Not a git repository"
