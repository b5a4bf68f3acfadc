"""
repomaster: package repository context for LLMs.

Overview
--------
Collects the files under one or more paths (honoring the nearest
``.gitignore``), then writes a single Markdown document containing:

- the file system location and git metadata of ``HEAD``,
- the directory structure as an indented tree,
- the content of every text file (binary files are skipped, large files
  are truncated at 16 KiB),
- a summary with file and line counts.

Options can also come from a ``.repomaster-config.toml`` file in the current
directory; command-line values win.

Usage
-----
    repomaster . > context.md
    repomaster src tests --output context.md
    repomaster . --recent 3 --grep "TODO" --include "*.py,*.toml"
"""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from repomaster import __version__
from repomaster.config import CONFIG_FILENAME, config_to_settings_fields, load_toml_config
from repomaster.exceptions import RepomasterError
from repomaster.logging import logger, setup_logging
from repomaster.processor import run
from repomaster.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Sequence


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="repomaster",
        description="Repository Context Packager - package repo context for LLMs.",
    )
    p.add_argument("--version", "-V", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "paths",
        nargs="+",
        help="One or more files/directories (use . for current).",
    )
    p.add_argument("-o", "--output", type=str, default=None, help="Output file (default: stdout).")
    p.add_argument(
        "--no-gitignore",
        action="store_true",
        default=None,
        help="Do not honor .gitignore rules nor the built-in exclusions.",
    )
    p.add_argument(
        "-l",
        "--line-numbers",
        action="store_true",
        default=None,
        help="Prefix file content lines with line numbers.",
    )
    p.add_argument(
        "-r",
        "--recent",
        nargs="?",
        const=True,
        default=None,
        metavar="DAYS",
        help="Only files modified in the last DAYS days (default 7).",
    )
    p.add_argument("-g", "--grep", type=str, default=None, help="Only files whose content matches this regex.")
    p.add_argument(
        "--include",
        type=str,
        default=None,
        help="Comma list of globs; only matching files are kept.",
    )
    p.add_argument("--config", type=str, default=None, help=f"Config file (default: {CONFIG_FILENAME}).")
    p.add_argument("--log-file", type=str, default=None, help="Log file path (default: stderr).")
    return p


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse the command line and merge it over the config file.

    Args:
        argv (Sequence[str] | None): arguments, ``sys.argv[1:]`` when None.

    Returns:
        Settings: the validated run settings.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config_path = args.config or CONFIG_FILENAME
    fields: dict[str, Any] = config_to_settings_fields(load_toml_config(config_path))
    for name, value in vars(args).items():
        if value is not None:
            fields[name] = value
    try:
        return Settings(**fields)
    except ValidationError as e:
        parser.error(str(e))
        raise  # parser.error exits


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    if settings.log_file:
        setup_logging(settings.log_file)

    try:
        return run(settings)
    except RepomasterError as e:
        logger.error("fatal", error=str(e), error_type=type(e).__name__)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
