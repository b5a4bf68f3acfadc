from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

import pytest

from repomaster import logging as repomaster_logging
from repomaster.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def log_file(tmp_path: Path) -> Iterator[Path]:
    yield tmp_path / "run.log"
    repomaster_logging._install_handler(logging.StreamHandler(sys.stderr))  # noqa: SLF001


@pytest.mark.unit
def test_setup_logging_writes_json_lines_to_file(log_file: Path) -> None:
    log = setup_logging(log_file)
    log.warning("sample_event", path="src/a.py")
    for handler in logging.getLogger().handlers:
        handler.flush()

    record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert record["event"] == "sample_event"
    assert record["path"] == "src/a.py"
    assert record["level"] == "warning"
    assert "timestamp" in record


@pytest.mark.unit
def test_setup_logging_file_replaces_previous_handler(log_file: Path) -> None:
    before = repomaster_logging._handler  # noqa: SLF001

    setup_logging(log_file)

    root_handlers = logging.getLogger().handlers
    assert before not in root_handlers
    assert isinstance(repomaster_logging._handler, logging.FileHandler)  # noqa: SLF001
    assert repomaster_logging._handler in root_handlers  # noqa: SLF001


@pytest.mark.unit
def test_setup_logging_without_file_keeps_handlers() -> None:
    before = list(logging.getLogger().handlers)

    setup_logging()

    assert logging.getLogger().handlers == before
