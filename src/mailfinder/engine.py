"""Build-then-serve facade tying the builder, store and searcher together."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Sequence

from mailfinder.config import AppConfig
from mailfinder.index.indexer import IndexBuilder, Indexer, IndexStats
from mailfinder.index.search import Searcher
from mailfinder.index.storage import SQLiteIndexStore, import_json
from mailfinder.models import IndexSnapshot, SearchOutcome

LOGGER = logging.getLogger(__name__)


class SearchEngine:
    """Serves queries from the most recently published snapshot.

    Builds always go into a fresh :class:`IndexBuilder`; the result is
    published by swapping the searcher reference, so in-flight queries keep
    the snapshot they started with.
    """

    def __init__(self, store: SQLiteIndexStore) -> None:
        self.store = store
        self._publish_lock = threading.Lock()
        self._searcher = Searcher(IndexSnapshot.empty())

    @classmethod
    def open(cls, config: AppConfig, base_dir: Path | None = None) -> "SearchEngine":
        """Create an engine, rebuilding or loading according to ``config.reload``."""
        db_path = config.resolve_db_path(base_dir)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        engine = cls(SQLiteIndexStore(db_path))
        if config.reload:
            engine.rebuild([config.resolve_corpus_dir(base_dir)], workers=config.workers)
        else:
            engine.load()
        return engine

    @property
    def snapshot(self) -> IndexSnapshot:
        return self._searcher.snapshot

    def publish(self, snapshot: IndexSnapshot) -> None:
        with self._publish_lock:
            self._searcher = Searcher(snapshot)
        LOGGER.info(
            "Published index with %d terms over %d messages",
            snapshot.token_count,
            snapshot.document_count,
        )

    def rebuild(self, paths: Sequence[Path], *, workers: int = 1) -> IndexStats:
        """Index ``paths`` from scratch, persist the result and publish it."""
        builder = IndexBuilder()
        stats = Indexer(builder, workers=workers).index(paths)
        content, locations = builder.export_snapshot()
        self.store.save(content, locations)
        self.publish(builder.snapshot())
        return stats

    def load(self) -> None:
        """Publish the snapshot held by the store."""
        if not self.store.has_snapshot():
            LOGGER.warning("No stored index in %s, serving an empty index", self.store.db_path)
        builder = IndexBuilder()
        builder.load_snapshot(*self.store.load())
        self.publish(builder.snapshot())

    def load_json(self, directory: Path) -> None:
        """Replace the stored index with a JSON export, then publish it."""
        builder = IndexBuilder()
        builder.load_snapshot(*import_json(directory))
        content, locations = builder.export_snapshot()
        self.store.save(content, locations)
        self.publish(builder.snapshot())

    def search(self, query: str) -> SearchOutcome:
        return self._searcher.search(query)

    def close(self) -> None:
        self.store.close()
