"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def iter_document_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield message file paths from input paths, descending into directories.

    Hidden files, and anything below a hidden directory, are ignored.
    """
    for item in inputs:
        if item.is_dir():
            children = sorted(child for child in item.rglob("*") if child.is_file())
            yield from (child for child in children if not _is_hidden(child, item))
        elif item.is_file():
            yield item


def read_document(path: Path) -> str:
    """Read a message file as UTF-8 text."""
    return path.read_text(encoding="utf-8")
