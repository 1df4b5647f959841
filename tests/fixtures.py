"""In-memory stand-ins for the pool handle and its connections."""
from contextlib import asynccontextmanager


class FakeTransaction:
    def __init__(self, conn):
        self.conn = conn

    async def commit(self):
        if self.conn.commit_error is not None:
            raise self.conn.commit_error
        self.conn.committed = True

    async def rollback(self):
        self.conn.rolled_back = True


class FakeConnection:
    """Records what the upserter does with a pooled connection."""

    def __init__(self, execute_error=None, commit_error=None, fail_after=0, begin_error=None):
        self.begin_error = begin_error
        self.execute_error = execute_error
        self.commit_error = commit_error
        self.fail_after = fail_after
        self.statements = []
        self.begun = 0
        self.committed = False
        self.rolled_back = False

    async def begin(self):
        if self.begin_error is not None:
            raise self.begin_error
        self.begun += 1
        return FakeTransaction(self)

    async def execute(self, statement):
        self.statements.append(statement)
        if self.execute_error is not None and len(self.statements) > self.fail_after:
            raise self.execute_error


class FakeDatabase:
    def __init__(self, conn=None, acquire_error=None):
        self.conn = conn or FakeConnection()
        self.acquire_error = acquire_error
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def acquire(self):
        if self.acquire_error is not None:
            raise self.acquire_error
        self.acquired += 1
        try:
            yield self.conn
        finally:
            self.released += 1


