"""Tests for the FastAPI web application."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mailfinder.engine import SearchEngine
from mailfinder.index.storage import SQLiteIndexStore
from mailfinder.web.app import _ensure_db_parent, _resolve_db_path, app


client = TestClient(app)


@pytest.fixture
def indexed_db(tmp_path: Path, maildir: Path) -> Path:
    db_path = tmp_path / "indexed.db"
    engine = SearchEngine(SQLiteIndexStore(db_path))
    engine.rebuild([maildir])
    engine.close()
    return db_path


class TestHelperFunctions:
    """Tests for helper functions."""

    def test_resolve_db_path_with_none(self) -> None:
        assert isinstance(_resolve_db_path(None), Path)

    def test_resolve_db_path_with_path(self, tmp_path: Path) -> None:
        db_path = tmp_path / "custom.db"
        assert _resolve_db_path(db_path) == db_path

    def test_ensure_db_parent_creates_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "subdir" / "test.db"
        _ensure_db_parent(db_path)
        assert db_path.parent.exists()


class TestSearchEndpoint:
    """Tests for POST /search endpoint."""

    def test_search_database_not_found(self, tmp_path: Path) -> None:
        response = client.post("/search", json={"query": "test", "db": str(tmp_path / "none.db")})

        assert response.status_code == 404
        assert "Database not found" in response.json()["detail"]

    def test_search_match(self, indexed_db: Path) -> None:
        response = client.post("/search", json={"query": "Hel", "db": str(indexed_db)})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["terms"] == ["hello"]
        assert len(data["locations"]) == 2

    def test_search_no_match(self, indexed_db: Path) -> None:
        response = client.post("/search", json={"query": "zebra", "db": str(indexed_db)})

        assert response.status_code == 200
        assert response.json() == {"status": "no_match", "terms": [], "locations": []}

    def test_search_empty_query_returns_everything(self, indexed_db: Path) -> None:
        response = client.post("/search", json={"query": "", "db": str(indexed_db)})

        assert response.status_code == 200
        assert len(response.json()["locations"]) == 2

    def test_search_non_string_query(self, indexed_db: Path) -> None:
        response = client.post("/search", json={"query": 123, "db": str(indexed_db)})
        assert response.status_code == 422

    def test_search_missing_query(self) -> None:
        response = client.post("/search", json={})
        assert response.status_code == 422


class TestStatsEndpoint:
    """Tests for GET /stats endpoint."""

    def test_stats_database_not_found(self, tmp_path: Path) -> None:
        response = client.get("/stats", params={"db": str(tmp_path / "none.db")})

        assert response.status_code == 200
        assert response.json()["document_count"] == 0

    def test_stats_indexed(self, indexed_db: Path) -> None:
        response = client.get("/stats", params={"db": str(indexed_db)})

        data = response.json()
        assert data["document_count"] == 2
        assert data["token_count"] == 3


class TestIndexEndpoint:
    """Tests for POST /index endpoint."""

    def test_index_no_paths(self) -> None:
        response = client.post("/index", json={"paths": []})

        assert response.status_code == 400
        assert "No path provided" in response.json()["detail"]

    def test_index_blank_paths(self) -> None:
        response = client.post("/index", json={"paths": ["   "]})
        assert response.status_code == 400

    def test_index_path_not_found(self, tmp_path: Path) -> None:
        response = client.post(
            "/index",
            json={"paths": [str(tmp_path / "missing")], "db": str(tmp_path / "t.db")},
        )
        assert response.status_code == 404

    def test_index_null_byte(self, tmp_path: Path) -> None:
        response = client.post(
            "/index", json={"paths": ["/tmp/\u0000evil"], "db": str(tmp_path / "t.db")}
        )
        assert response.status_code == 400

    def test_index_maildir(self, tmp_path: Path, maildir: Path) -> None:
        db_path = tmp_path / "nested" / "web.db"

        response = client.post(
            "/index", json={"paths": [str(maildir)], "db": str(db_path), "workers": 2}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["stats"]["indexed"] == 2
        assert data["stats"]["skipped"] == 1
        assert db_path.exists()

        search = client.post("/search", json={"query": "world", "db": str(db_path)})
        assert len(search.json()["locations"]) == 1
