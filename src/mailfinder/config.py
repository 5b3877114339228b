"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_PATH = Path("data/mailfinder.db")
DEFAULT_CORPUS_DIR = Path("maildir")


def _get_default_db_path() -> Path:
    """Database path, overridable with ``MAILFINDER_DB``."""
    env_db = os.environ.get("MAILFINDER_DB")
    return Path(env_db) if env_db else DEFAULT_DB_PATH


def _get_default_corpus_dir() -> Path:
    """Corpus directory, overridable with ``MAILFINDER_CORPUS``."""
    env_corpus = os.environ.get("MAILFINDER_CORPUS")
    return Path(env_corpus) if env_corpus else DEFAULT_CORPUS_DIR


@dataclass(slots=True)
class AppConfig:
    db_path: Path | None = None
    corpus_dir: Path | None = None
    # Rebuild from the corpus instead of loading the stored snapshot.
    reload: bool = False
    workers: int = 1

    def __post_init__(self) -> None:
        if self.db_path is None:
            self.db_path = _get_default_db_path()
        if self.corpus_dir is None:
            self.corpus_dir = _get_default_corpus_dir()

    def resolve_db_path(self, base_dir: Path | None = None) -> Path:
        if self.db_path is None:
            self.db_path = _get_default_db_path()
        if Path(self.db_path).is_absolute() or base_dir is None:
            return Path(self.db_path)
        return base_dir / self.db_path

    def resolve_corpus_dir(self, base_dir: Path | None = None) -> Path:
        if self.corpus_dir is None:
            self.corpus_dir = _get_default_corpus_dir()
        if Path(self.corpus_dir).is_absolute() or base_dir is None:
            return Path(self.corpus_dir)
        return base_dir / self.corpus_dir
