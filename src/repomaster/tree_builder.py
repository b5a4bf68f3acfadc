"""Directory tree construction and plain-text rendering."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pyuca import Collator

if TYPE_CHECKING:
    from collections.abc import Iterable

_SEPARATORS = re.compile(r"[\\/]")


@dataclass(frozen=True)
class Leaf:
    """A file in the tree."""


@dataclass
class Directory:
    """A directory in the tree, mapping entry names to child nodes."""

    children: dict[str, Node] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.children


Node = Leaf | Directory

LEAF = Leaf()


def split_path(rel: str) -> list[str]:
    """Split on forward or backward slashes, dropping empty segments."""
    return [part for part in _SEPARATORS.split(rel) if part]


def build_tree(relative_paths: Iterable[str]) -> Directory:
    """Build a nested ``Directory`` from relative file paths.

    Inserting the same path twice is a no-op. A name already present as a
    directory is not replaced by a file of the same name.

    Args:
        relative_paths (Iterable[str]): paths such as ``"src/main.py"`` or ``"src\\main.py"``.

    Returns:
        Directory: the root node.
    """
    root = Directory()
    for rel in relative_paths:
        parts = split_path(rel)
        node = root
        for i, name in enumerate(parts):
            if i == len(parts) - 1:
                node.children.setdefault(name, LEAF)
                break
            child = node.children.get(name)
            if not isinstance(child, Directory):
                child = Directory()
                node.children[name] = child
            node = child
    return root


@functools.cache
def _collator() -> Collator:
    return Collator()


def locale_sort_key(name: str) -> tuple[tuple[int, ...], str]:
    """Unicode collation key (root locale), with the raw name as a last tie-break.

    Punctuation sorts before digits and digits before letters; letters compare
    case-insensitively first, lowercase before uppercase.
    """
    return (_collator().sort_key(name), name)


def render_tree(tree: Directory, indent: str = "") -> str:
    """Render ``tree`` as indented text, one entry per line.

    Directories come before files at every level, each group ordered with
    ``locale_sort_key``. Directories are suffixed with ``/`` and their
    children are indented two more spaces.

    Args:
        tree (Directory): the node to render.
        indent (str): prefix for this level's lines.

    Returns:
        str: the rendered tree, or an empty string for an empty tree.
    """
    dirs = sorted(
        ((name, child) for name, child in tree.children.items() if isinstance(child, Directory)),
        key=lambda item: locale_sort_key(item[0]),
    )
    files = sorted(
        (name for name, child in tree.children.items() if isinstance(child, Leaf)),
        key=locale_sort_key,
    )

    lines: list[str] = []
    for name, child in dirs:
        lines.append(f"{indent}{name}/")
        sub = render_tree(child, indent + "  ")
        if sub:
            lines.append(sub)
    lines.extend(f"{indent}{name}" for name in files)
    return "\n".join(lines)
