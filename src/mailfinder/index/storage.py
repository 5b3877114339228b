"""SQLite persistence for index snapshots, plus the legacy JSON format."""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Sequence

from mailfinder.models import ContentIndex, LocationIndex

CONTENT_INDEX_FILE = "content_index.json"
LOCATION_INDEX_FILE = "ids_to_file_index.json"


class SQLiteIndexStore:
    """Stores the content and location indices in two tables."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._ensure_schema()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS locations (
                    doc_id TEXT PRIMARY KEY,
                    location TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS postings (
                    token TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    doc_id TEXT NOT NULL,
                    PRIMARY KEY (token, doc_id)
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS snapshot_info (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    saved_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def save(self, content_map: Mapping[str, Sequence[str]], location_map: Mapping[str, str]) -> None:
        """Replace the stored snapshot with the given indices."""
        with self.transaction() as conn:
            conn.execute("DELETE FROM postings")
            conn.execute("DELETE FROM locations")
            conn.executemany(
                "INSERT INTO locations(doc_id, location) VALUES (?, ?)",
                location_map.items(),
            )
            conn.executemany(
                "INSERT INTO postings(token, position, doc_id) VALUES (?, ?, ?)",
                (
                    (token, position, doc_id)
                    for token, ids in content_map.items()
                    for position, doc_id in enumerate(ids)
                ),
            )
            conn.execute("INSERT OR REPLACE INTO snapshot_info(id) VALUES (1)")

    def load(self) -> tuple[ContentIndex, LocationIndex]:
        """Read the stored snapshot. Both maps are empty if nothing was saved."""
        content: ContentIndex = {}
        for row in self._conn.execute(
            "SELECT token, doc_id FROM postings ORDER BY token, position"
        ):
            content.setdefault(row["token"], []).append(row["doc_id"])
        locations: LocationIndex = {
            row["doc_id"]: row["location"]
            for row in self._conn.execute("SELECT doc_id, location FROM locations")
        }
        return content, locations

    def has_snapshot(self) -> bool:
        row = self._conn.execute("SELECT 1 FROM snapshot_info WHERE id = 1").fetchone()
        return row is not None

    def get_stats(self) -> dict:
        conn = self._conn
        token_count = conn.execute("SELECT COUNT(DISTINCT token) FROM postings").fetchone()[0]
        posting_count = conn.execute("SELECT COUNT(*) FROM postings").fetchone()[0]
        document_count = conn.execute("SELECT COUNT(*) FROM locations").fetchone()[0]
        saved = conn.execute("SELECT saved_at FROM snapshot_info WHERE id = 1").fetchone()
        return {
            "token_count": token_count,
            "document_count": document_count,
            "posting_count": posting_count,
            "saved_at": saved["saved_at"] if saved else None,
        }


def export_json(
    content_map: Mapping[str, Sequence[str]],
    location_map: Mapping[str, str],
    directory: Path,
) -> tuple[Path, Path]:
    """Write both indices as JSON files into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    content_path = directory / CONTENT_INDEX_FILE
    location_path = directory / LOCATION_INDEX_FILE
    content_path.write_text(
        json.dumps({token: list(ids) for token, ids in content_map.items()}), encoding="utf-8"
    )
    location_path.write_text(json.dumps(dict(location_map)), encoding="utf-8")
    return content_path, location_path


def import_json(directory: Path) -> tuple[ContentIndex, LocationIndex]:
    """Read indices previously written by :func:`export_json`."""
    content = json.loads((directory / CONTENT_INDEX_FILE).read_text(encoding="utf-8"))
    locations = json.loads((directory / LOCATION_INDEX_FILE).read_text(encoding="utf-8"))
    return content, locations
