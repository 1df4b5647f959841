"""Exceptions raised by repostore.

Every failure of a batch upsert surfaces as one ``UpsertError`` subclass with
the driver/SQLAlchemy exception chained as ``__cause__``.
"""


class RepoStoreError(Exception):
    """Base class for all repostore errors."""


class DatabaseNotInitialized(RepoStoreError):
    """The pool handle was used before ``init()`` or after ``shutdown()``."""

    def __init__(self):
        super().__init__("Database pool is not initialized. Call init() first.")


class UpsertError(RepoStoreError):
    """A batch upsert failed and nothing from the batch was persisted."""

    def __init__(self, message: str, rows: int = 0):
        self.rows = rows
        super().__init__(message)


class ConnectionFailure(UpsertError):
    """The pool could not supply a connection."""


class StatementFailure(UpsertError):
    """The upsert statement failed; the transaction was rolled back."""


class CommitFailure(UpsertError):
    """The store rejected the commit after the statement succeeded."""
