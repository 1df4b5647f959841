"""Idempotent batch upsert of repository records.

All SQL for writing ``repositories`` lives in this module.
"""
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any, Union

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import Insert, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncTransaction

from repostore.config import MAX_CHUNK_SIZE
from repostore.errors import CommitFailure, ConnectionFailure, StatementFailure
from repostore.records import RepositoryRecord, RepositoryRow
from .engine import Database
from .models import Repository

logger = logging.getLogger(__name__)

# Columns overwritten from the proposed row when node_id already exists
MUTABLE_COLUMNS = ("database_id", "name", "owner", "stars", "url")

DEFAULT_CHUNK_SIZE = 5000

RecordLike = Union[RepositoryRecord, Mapping[str, Any]]


def collapse_duplicates(records: Iterable[RecordLike]) -> list[RepositoryRow]:
    """Map records to rows, keeping only the last record for each node_id.

    PostgreSQL rejects an ON CONFLICT DO UPDATE that hits the same key twice
    in one statement, so duplicates are resolved here instead.
    """
    rows: dict[str, RepositoryRow] = {}
    for record in records:
        if not isinstance(record, RepositoryRecord):
            record = RepositoryRecord.model_validate(record)
        row = record.as_row()
        rows[row.node_id] = row
    return list(rows.values())


def build_upsert_statement(rows: Sequence[RepositoryRow]) -> Insert:
    """INSERT every row; on node_id conflict overwrite the mutable columns."""
    stmt = insert(Repository).values([row._asdict() for row in rows])
    set_ = {column: stmt.excluded[column] for column in MUTABLE_COLUMNS}
    set_["updated_at"] = func.now()
    return stmt.on_conflict_do_update(index_elements=["node_id"], set_=set_)


def _chunks(rows: Sequence[RepositoryRow], size: int) -> Iterator[Sequence[RepositoryRow]]:
    for start in range(0, len(rows), size):
        yield rows[start : start + size]


async def _rollback(trans: AsyncTransaction) -> None:
    try:
        await trans.rollback()
    except SQLAlchemyError as exc:
        # the connection is discarded on release; the original error still propagates
        logger.warning(f"Rollback failed: {exc}")


class BatchUpserter:
    """Persist batches of repositories atomically against a shared pool."""

    def __init__(self, database: Database, *, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if not 1 <= chunk_size <= MAX_CHUNK_SIZE:
            raise ValueError(f"chunk_size must be between 1 and {MAX_CHUNK_SIZE}")
        self.database = database
        self.chunk_size = chunk_size

    async def upsert(self, records: Iterable[RecordLike]) -> int:
        """Insert new repositories and overwrite existing ones matched by node_id.

        Either every record is written or none is. Returns the number of
        distinct rows written; an empty batch returns 0 without touching
        the database.
        """
        rows = collapse_duplicates(records)
        if not rows:
            logger.debug("Empty batch, nothing to upsert")
            return 0

        async with self.database.acquire() as conn:
            try:
                trans = await conn.begin()
            except SQLAlchemyError as exc:
                logger.error(f"Could not begin a transaction: {exc}")
                raise ConnectionFailure(
                    f"Could not begin a transaction: {exc}", rows=len(rows)
                ) from exc

            try:
                for chunk in _chunks(rows, self.chunk_size):
                    await conn.execute(build_upsert_statement(chunk))
            except SQLAlchemyError as exc:
                await _rollback(trans)
                logger.error(f"Upsert of {len(rows)} repositories rolled back: {exc}")
                raise StatementFailure(
                    f"Upsert of {len(rows)} repositories failed: {exc}", rows=len(rows)
                ) from exc
            except BaseException:
                await _rollback(trans)
                raise

            try:
                await trans.commit()
            except SQLAlchemyError as exc:
                logger.error(f"Commit of {len(rows)} repositories failed: {exc}")
                raise CommitFailure(
                    f"Commit of {len(rows)} repositories failed: {exc}", rows=len(rows)
                ) from exc

        logger.info(f"Upserted {len(rows)} repositories")
        return len(rows)
