from pathlib import Path

import pytest

from repomaster import cli


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def test_end_to_end_rules_from_parent_directory(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.hidden\n", encoding="utf-8")
    repo = tmp_path / "repo"
    (repo / "src").mkdir(parents=True)
    (repo / "README.md").write_text("# Readme\n", encoding="utf-8")
    (repo / "src" / "index.js").write_text("export default 1;\n", encoding="utf-8")
    (repo / "src" / "notes.hidden").write_text("do not ship\n", encoding="utf-8")
    output = tmp_path / "context.md"

    exit_code = cli.main([str(repo), "--output", str(output)])

    assert exit_code == 0
    report = output.read_text(encoding="utf-8")
    assert report.startswith("# Repository Context\n\n## File System Location\n")
    assert "## Structure\n```\nsrc/\n  index.js\nREADME.md\n```" in report
    assert "### File: src/index.js\n\n```javascript\nexport default 1;\n\n```" in report
    assert "do not ship" not in report
    assert "- Total files: 2\n" in report


def test_end_to_end_truncates_large_file(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / "big.txt").write_bytes(b"x" * 20000)
    output = tmp_path / "context.md"

    exit_code = cli.main([str(repo), "--no-gitignore", "--output", str(output)])

    assert exit_code == 0
    report = output.read_text(encoding="utf-8")
    assert "x" * 16384 + "\n```" in report
    assert "x" * 16385 not in report
    assert "> [truncated]" in report
    assert "- Truncated files: 1\n" in report


def test_end_to_end_config_file_enables_line_numbers(tmp_path: Path) -> None:
    (tmp_path / ".repomaster-config.toml").write_text("lineNumbers = true\n", encoding="utf-8")
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / "main.py").write_text("a = 1\nb = 2\n", encoding="utf-8")
    output = tmp_path / "context.md"

    exit_code = cli.main([str(repo), "-o", str(output)])

    assert exit_code == 0
    assert "1 | a = 1\n2 | b = 2\n3 | " in output.read_text(encoding="utf-8")


def test_end_to_end_missing_input_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli.main([str(tmp_path / "nope")])

    assert exit_code == 1
    assert capsys.readouterr().out == ""
