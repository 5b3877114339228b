"""Command line interface for MailFinder."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from mailfinder.config import AppConfig
from mailfinder.engine import SearchEngine
from mailfinder.index.indexer import find_documents
from mailfinder.index.storage import SQLiteIndexStore, export_json
from mailfinder.web.app import app as web_app


console = Console()
app = typer.Typer(help="MailFinder - prefix search over email archives")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


@app.command()
def index(
    inputs: List[Path] = typer.Argument(
        ..., help="Message files or maildir folders to index.", resolve_path=True
    ),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    workers: int = typer.Option(AppConfig().workers, help="Threads used to read messages"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rebuild the index from one or more paths and store it."""
    _setup_logging(verbose)
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path, workers=workers)

    resolved_db = config.resolve_db_path(Path.cwd())
    _ensure_db_parent(resolved_db)

    console.print(f"Indexing into [bold]{resolved_db}[/bold]...")
    files = find_documents(inputs)
    if not files:
        console.print("[yellow]No message files found.[/yellow]")
        return

    engine = SearchEngine(SQLiteIndexStore(resolved_db))
    try:
        stats = engine.rebuild(files, workers=config.workers)
    finally:
        engine.close()

    console.print(
        f"Indexed: {stats.indexed}, skipped: {stats.skipped}, failed: {stats.failed}"
    )


@app.command()
def search(
    query: str = typer.Argument(..., help="Prefix to search for"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    reload: bool = typer.Option(False, "--reload", help="Rebuild the index from the corpus first"),
    corpus: Path = typer.Option(None, "--corpus", help="Corpus folder used with --reload"),
    limit: int = typer.Option(50, help="Maximum number of locations to display"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Find messages containing a word that starts with QUERY."""
    _setup_logging(verbose)
    config = AppConfig(
        db_path=db if db is not None else AppConfig().db_path,
        corpus_dir=corpus if corpus is not None else AppConfig().corpus_dir,
        reload=reload,
    )
    resolved_db = config.resolve_db_path(Path.cwd())

    if not config.reload and not resolved_db.exists():
        raise typer.BadParameter(f"Database not found: {resolved_db}")
    if config.reload and not config.resolve_corpus_dir(Path.cwd()).exists():
        raise typer.BadParameter(f"Corpus not found: {config.resolve_corpus_dir(Path.cwd())}")

    engine = SearchEngine.open(config, Path.cwd())
    try:
        outcome = engine.search(query)
    finally:
        engine.close()

    if not outcome.ok:
        console.print("[yellow]No matches found.[/yellow]")
        return

    console.print(f"Matching terms: {', '.join(outcome.terms)}")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Location")
    for position, location in enumerate(outcome.locations[:limit], start=1):
        table.add_row(str(position), location)

    console.print(table)
    if len(outcome.locations) > limit:
        console.print(f"... and {len(outcome.locations) - limit} more")


@app.command()
def stats(
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Show the size of the stored index."""
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    resolved_db = config.resolve_db_path(Path.cwd())

    if not resolved_db.exists():
        console.print("[yellow]Database not found, nothing indexed yet.[/yellow]")
        return

    store = SQLiteIndexStore(resolved_db)
    try:
        info = store.get_stats()
    finally:
        store.close()

    console.print(
        f"Messages: {info['document_count']}, terms: {info['token_count']}, "
        f"postings: {info['posting_count']}"
    )


@app.command()
def export(
    directory: Path = typer.Argument(..., help="Output folder for the JSON files"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Export the stored index as JSON."""
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    resolved_db = config.resolve_db_path(Path.cwd())

    if not resolved_db.exists():
        raise typer.BadParameter(f"Database not found: {resolved_db}")

    store = SQLiteIndexStore(resolved_db)
    try:
        content, locations = store.load()
    finally:
        store.close()

    content_path, location_path = export_json(content, locations, directory)
    console.print(f"Wrote {content_path} and {location_path}")


@app.command("import")
def import_(
    directory: Path = typer.Argument(..., help="Folder holding the exported JSON files"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Replace the stored index with a JSON export."""
    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    resolved_db = config.resolve_db_path(Path.cwd())
    _ensure_db_parent(resolved_db)

    engine = SearchEngine(SQLiteIndexStore(resolved_db))
    try:
        engine.load_json(directory)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Export not found: {exc.filename}") from exc
    finally:
        engine.close()

    snapshot = engine.snapshot
    console.print(
        f"Imported {snapshot.document_count} messages and {snapshot.token_count} terms"
    )


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
) -> None:
    """Start the HTTP search API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    config = AppConfig(db_path=db if db is not None else AppConfig().db_path)
    resolved_db = config.resolve_db_path(Path.cwd())
    if not resolved_db.exists():
        console.print("[yellow]Warning: database not found, searches might fail.[/yellow]")

    # The app resolves its database through AppConfig, which reads MAILFINDER_DB.
    os.environ["MAILFINDER_DB"] = str(resolved_db)
    console.print(f"Starting search API on http://{host}:{port} (database: {resolved_db})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
