import asyncio
import json
import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from repostore.config import get_settings
from repostore.db import BatchUpserter, Database, ensure_schema
from repostore.errors import RepoStoreError
from repostore.records import RepositoryRecord

app = typer.Typer()
logger = logging.getLogger(__name__)


def parse_records(text: str) -> list[RepositoryRecord]:
    """Parse a JSON array or newline-delimited JSON objects into records."""
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        items = json.loads(stripped)
    else:
        items = [json.loads(line) for line in stripped.splitlines() if line.strip()]
    return [RepositoryRecord.model_validate(item) for item in items]


async def _init_db() -> None:
    settings = get_settings()
    async with Database.from_settings(settings) as db:
        await ensure_schema(db, settings.schema_path)


async def _upsert(records: list[RepositoryRecord]) -> int:
    settings = get_settings()
    async with Database.from_settings(settings) as db:
        return await BatchUpserter(db, chunk_size=settings.upsert_chunk_size).upsert(records)


@app.callback()
def main(log_level: str = typer.Option("INFO", help="Logging level.")):
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def init_db():
    """Create the repositories table if it does not exist."""
    try:
        asyncio.run(_init_db())
    except (RepoStoreError, SQLAlchemyError, OSError) as e:
        logger.error(f"Schema setup failed: {e}")
        raise typer.Exit(code=1)
    typer.echo("Schema applied")


@app.command()
def upsert(path: str = typer.Argument(..., help="JSON or NDJSON file, '-' for stdin.")):
    """Upsert the repositories in <path> as one atomic batch."""
    try:
        text = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
        records = parse_records(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        typer.echo(f"Invalid input: {e}", err=True)
        raise typer.Exit(code=2)

    try:
        written = asyncio.run(_upsert(records))
    except RepoStoreError as e:
        logger.error(f"Upsert failed: {e}")
        raise typer.Exit(code=1)
    typer.echo(f"Upserted {written} repositories")


if __name__ == "__main__":
    app()
