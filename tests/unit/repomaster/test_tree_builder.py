from __future__ import annotations

import itertools

import pytest

from repomaster.tree_builder import LEAF, Directory, build_tree, render_tree


@pytest.mark.unit
def test_build_tree_empty() -> None:
    assert build_tree([]) == Directory()


@pytest.mark.unit
def test_build_tree_nested_structure() -> None:
    tree = build_tree(["src/index.js", "tests/index.test.js", "README.md"])

    assert tree == Directory(
        {
            "src": Directory({"index.js": LEAF}),
            "tests": Directory({"index.test.js": LEAF}),
            "README.md": LEAF,
        },
    )


@pytest.mark.unit
@pytest.mark.parametrize("rel", ["src/lib/utils.js", "src\\lib\\utils.js", "src/lib\\utils.js", "src//lib/utils.js"])
def test_build_tree_accepts_any_separator(rel: str) -> None:
    assert build_tree([rel]) == Directory({"src": Directory({"lib": Directory({"utils.js": LEAF})})})


@pytest.mark.unit
def test_build_tree_is_idempotent() -> None:
    assert build_tree(["src/index.js", "src/index.js"]) == build_tree(["src/index.js"])


@pytest.mark.unit
def test_render_tree_empty_is_empty_string() -> None:
    assert render_tree(Directory()) == ""


@pytest.mark.unit
def test_render_tree_directories_before_files() -> None:
    assert render_tree(build_tree(["z.js", "a/n.js"])) == "a/\n  n.js\nz.js"
    assert render_tree(build_tree(["README.md", "src/index.js"])) == "src/\n  index.js\nREADME.md"


@pytest.mark.unit
def test_render_tree_complete_project() -> None:
    files = [
        "package.json",
        "README.md",
        "src/cli.js",
        "src/index.js",
        "src/utils/helper.js",
        "tests/cli.test.js",
    ]

    expected = "\n".join(
        [
            "src/",
            "  utils/",
            "    helper.js",
            "  cli.js",
            "  index.js",
            "tests/",
            "  cli.test.js",
            "package.json",
            "README.md",
        ],
    )

    assert render_tree(build_tree(files)) == expected


@pytest.mark.unit
def test_render_tree_is_stable_under_reordering_and_duplicates() -> None:
    files = ["b/x.py", "a.txt", "B.txt", "b/y/z.py", "c/d.md"]
    expected = render_tree(build_tree(files))

    for permutation in itertools.permutations(files):
        assert render_tree(build_tree([*permutation, permutation[0]])) == expected


@pytest.mark.unit
def test_render_tree_dotfiles_and_empty_directories() -> None:
    assert render_tree(Directory({".gitignore": LEAF, ".env": LEAF})) == ".env\n.gitignore"
    assert render_tree(Directory({"empty-folder": Directory()})) == "empty-folder/"


@pytest.mark.unit
def test_render_tree_custom_indent() -> None:
    assert render_tree(build_tree(["src/index.js"]), ">>") == ">>src/\n>>  index.js"


@pytest.mark.unit
def test_render_tree_collates_punctuation_digits_and_letters() -> None:
    names = ["B.txt", "1a.txt", "b.txt", "a.txt", "-a.txt", "_a.txt"]

    assert render_tree(build_tree(names)).splitlines() == ["_a.txt", "-a.txt", "1a.txt", "a.txt", "b.txt", "B.txt"]


@pytest.mark.unit
def test_render_tree_underscore_before_dot() -> None:
    assert render_tree(build_tree(["test.py", "test_a.py"])) == "test_a.py\ntest.py"
    assert render_tree(build_tree(["my-file", "my_file"])) == "my_file\nmy-file"
