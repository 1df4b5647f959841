"""Idempotent PostgreSQL storage for crawled GitHub repositories."""
from repostore.db import BatchUpserter, Database, ensure_schema
from repostore.errors import (
    CommitFailure,
    ConnectionFailure,
    RepoStoreError,
    StatementFailure,
    UpsertError,
)
from repostore.records import RepositoryRecord, RepositoryRow

__all__ = [
    "BatchUpserter",
    "CommitFailure",
    "ConnectionFailure",
    "Database",
    "RepoStoreError",
    "RepositoryRecord",
    "RepositoryRow",
    "StatementFailure",
    "UpsertError",
    "ensure_schema",
]
