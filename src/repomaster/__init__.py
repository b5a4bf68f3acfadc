"""repomaster: package a repository's structure and contents into one Markdown report."""

__version__ = "0.1.0"
