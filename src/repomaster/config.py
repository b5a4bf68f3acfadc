from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from repomaster.logging import logger

CONFIG_FILENAME = ".repomaster-config.toml"
IGNORE_FILENAME = ".gitignore"
REPOSITORY_MARKER = ".git"

# Pruned at directory level whenever ignore rules are enabled.
DEFAULT_EXCLUDED_DIRS: frozenset[str] = frozenset({".git", "node_modules"})

MAX_FILE_SIZE = 16 * 1024
BINARY_SAMPLE_SIZE = 8000
BINARY_SUSPICIOUS_RATIO = 0.3
DEFAULT_RECENT_DAYS = 7
# Content search only looks at this many leading bytes of each file.
GREP_READ_LIMIT = 1024 * 1024

EXT2LANG: dict[str, str] = {
    ".bash": "bash",
    ".c": "c",
    ".cfg": "ini",
    ".cpp": "cpp",
    ".css": "css",
    ".go": "go",
    ".h": "c",
    ".hpp": "cpp",
    ".html": "html",
    ".ini": "ini",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".jsx": "javascript",
    ".md": "markdown",
    ".mjs": "javascript",
    ".php": "php",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".sh": "bash",
    ".sql": "sql",
    ".toml": "toml",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
}

# camelCase keys used in the config file, mapped to Settings field names.
CONFIG_KEYS: dict[str, str] = {
    "output": "output",
    "noGitIgnore": "no_gitignore",
    "lineNumbers": "line_numbers",
    "recent": "recent",
    "grep": "grep",
    "include": "include",
}


def guess_language(path: Path) -> str:
    """Get the suggested code fence language for a file.

    Args:
        path (Path): the file whose extension decides the language.

    Returns:
        str: the fence language name, or an empty string if unknown.
    """
    return EXT2LANG.get(path.suffix.lower(), "")


def load_toml_config(config_path: str | Path = CONFIG_FILENAME) -> dict[str, Any]:
    """Load options from a ``.repomaster-config.toml`` file if it exists.

    A missing file is not an error. A file that cannot be read or parsed is
    reported on the log and treated as empty.

    Args:
        config_path (str | Path): path to the TOML file, relative to the cwd or absolute.

    Returns:
        dict[str, Any]: the parsed document as plain Python values, or ``{}``.
    """
    full_path = Path(config_path).resolve()
    if not full_path.exists():
        return {}
    try:
        document = tomlkit.parse(full_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, TOMLKitError) as e:
        logger.error("config_parse_failed", path=str(full_path), error=str(e))
        return {}
    return document.unwrap()


def config_to_settings_fields(config: dict[str, Any]) -> dict[str, Any]:
    """Translate config file keys into ``Settings`` field names.

    Unknown keys are logged and ignored.

    Args:
        config (dict[str, Any]): the raw config file mapping.

    Returns:
        dict[str, Any]: values keyed by ``Settings`` field names.
    """
    fields: dict[str, Any] = {}
    for key, value in config.items():
        name = CONFIG_KEYS.get(key)
        if name is None:
            logger.warning("config_unknown_key", key=key)
            continue
        fields[name] = value
    return fields
