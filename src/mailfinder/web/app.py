"""FastAPI application exposing MailFinder search over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from mailfinder.config import AppConfig
from mailfinder.engine import SearchEngine
from mailfinder.index.storage import SQLiteIndexStore

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="MailFinder API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class SearchPayload(BaseModel):
    query: str
    db: Path | None = None


class IndexPayload(BaseModel):
    paths: List[str]
    db: str | None = None
    workers: int | None = None


def _resolve_db_path(db: Path | None) -> Path:
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    return config.resolve_db_path(Path.cwd())


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/search")
async def search_messages(payload: SearchPayload) -> dict[str, Any]:
    resolved_db = _resolve_db_path(payload.db)
    if not resolved_db.exists():
        raise HTTPException(
            status_code=404,
            detail=f"Database not found at {resolved_db}. Index a maildir first.",
        )

    engine = SearchEngine(SQLiteIndexStore(resolved_db))
    try:
        engine.load()
        outcome = engine.search(payload.query)
    finally:
        engine.close()

    if outcome.status == "invalid_input":
        raise HTTPException(status_code=400, detail=outcome.error)

    return {"status": outcome.status, "terms": outcome.terms, "locations": outcome.locations}


@app.get("/stats")
async def index_stats(db: Path | None = None) -> dict[str, Any]:
    """Report the size of the stored index."""
    resolved_db = _resolve_db_path(db)
    if not resolved_db.exists():
        return {"token_count": 0, "document_count": 0, "posting_count": 0, "saved_at": None}

    store = SQLiteIndexStore(resolved_db)
    try:
        return store.get_stats()
    finally:
        store.close()


def _run_index_job(paths: List[Path], config: AppConfig, resolved_db: Path) -> dict[str, Any]:
    engine = SearchEngine(SQLiteIndexStore(resolved_db))
    try:
        stats = engine.rebuild(paths, workers=config.workers)
    finally:
        engine.close()

    return {
        "indexed": stats.indexed,
        "skipped": stats.skipped,
        "failed": stats.failed,
        "processed_files": [str(path) for path in stats.processed_files],
    }


@app.post("/index")
async def index_messages(payload: IndexPayload) -> dict[str, Any]:
    paths = [p.strip() for p in payload.paths if p.strip()]
    if not paths:
        raise HTTPException(status_code=400, detail="No path provided")

    config_defaults = AppConfig()
    config = AppConfig(
        db_path=Path(payload.db) if payload.db is not None else config_defaults.db_path,
        workers=payload.workers or config_defaults.workers,
    )
    resolved_db = config.resolve_db_path(Path.cwd())
    _ensure_db_parent(resolved_db)

    resolved_paths = []
    for raw_path in paths:
        if "\0" in raw_path:
            raise HTTPException(status_code=400, detail="Invalid path: contains null byte")
        path = Path(raw_path).expanduser().resolve()
        if not path.exists():
            raise HTTPException(status_code=404, detail="Path not found: %s" % raw_path)
        resolved_paths.append(path)

    try:
        stats = await asyncio.to_thread(_run_index_job, resolved_paths, config, resolved_db)
    except Exception as exc:  # pragma: no cover - defensive
        LOGGER.exception("Indexing failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return {"status": "ok", "db": str(resolved_db), "stats": stats}
