"""Index construction: the single-writer builder and the corpus pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence

from mailfinder.index.tokenizer import parse_document
from mailfinder.models import ContentIndex, IndexSnapshot, LocationIndex, ParsedDocument
from mailfinder.utils.files import iter_document_paths, read_document

LOGGER = logging.getLogger(__name__)


def find_documents(paths: Sequence[Path]) -> list[Path]:
    """Find all message files under the given paths."""
    return list(iter_document_paths(paths))


@dataclass(slots=True)
class IndexStats:
    indexed: int = 0
    skipped: int = 0
    failed: int = 0
    processed_files: list[Path] = field(default_factory=list)

    def increment(self, status: str, path: Path) -> None:
        if status == "indexed":
            self.indexed += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
        self.processed_files.append(path)


class IndexBuilder:
    """Owns the content and location indices while they are being built.

    Not thread-safe: exactly one thread may call the mutating methods.
    """

    def __init__(self) -> None:
        self._content: ContentIndex = {}
        self._locations: LocationIndex = {}

    def ingest(self, raw_text: str, location: str) -> bool:
        """Index one raw message. Returns False if it has no usable id."""
        parsed = parse_document(raw_text, location)
        if parsed is None:
            LOGGER.debug("No Message-ID in %s, skipping", location)
            return False
        self.add_parsed(parsed)
        return True

    def add_parsed(self, parsed: ParsedDocument) -> None:
        # The location is registered first so every posted id resolves.
        self._locations[parsed.doc_id] = parsed.location
        for token in parsed.tokens:
            postings = self._content.setdefault(token, [])
            if parsed.doc_id not in postings:
                postings.append(parsed.doc_id)

    def load_snapshot(self, content_map: Mapping[str, Sequence[str]], location_map: Mapping[str, str]) -> None:
        """Replace both indices wholesale."""
        self._content = {token: list(ids) for token, ids in content_map.items()}
        self._locations = dict(location_map)

    def export_snapshot(self) -> tuple[ContentIndex, LocationIndex]:
        """Return copies of both indices for serialization."""
        content = {token: list(ids) for token, ids in self._content.items()}
        return content, dict(self._locations)

    def snapshot(self) -> IndexSnapshot:
        """Freeze the current state for query serving."""
        return IndexSnapshot.from_dicts(self._content, self._locations)


class Indexer:
    """Reads a corpus from disk and feeds it to an :class:`IndexBuilder`.

    Files are read and tokenized by ``workers`` threads; the calling thread
    is the only writer to the builder.
    """

    def __init__(self, builder: Optional[IndexBuilder] = None, *, workers: int = 1) -> None:
        self.builder = builder if builder is not None else IndexBuilder()
        self.workers = max(1, workers)

    def index(self, paths: Sequence[Path]) -> IndexStats:
        """Index all message files found under the given paths."""
        files = find_documents(paths)
        if not files:
            LOGGER.warning("No message files found")
            return IndexStats()

        stats = IndexStats()
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            for path, status, parsed in pool.map(self._parse_single, files):
                if parsed is not None:
                    self.builder.add_parsed(parsed)
                stats.increment(status, path)

        LOGGER.info(
            "Indexed %d messages (%d skipped, %d failed)", stats.indexed, stats.skipped, stats.failed
        )
        return stats

    def _parse_single(self, path: Path) -> tuple[Path, str, Optional[ParsedDocument]]:
        """Read and tokenize a single file. Runs on a worker thread."""
        try:
            raw_text = read_document(path)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.error("Failed to read %s: %s", path, exc)
            return path, "failed", None

        parsed = parse_document(raw_text, str(path))
        if parsed is None:
            LOGGER.debug("No Message-ID in %s, skipping", path)
            return path, "skipped", None
        return path, "indexed", parsed
