import pytest
import sqlalchemy as sa

from repostore.db import ensure_schema


@pytest.mark.asyncio
async def test_tables_exist(database):
    async with database.acquire() as conn:
        names = await conn.run_sync(lambda sync_conn: sa.inspect(sync_conn).get_table_names())
    assert "repositories" in names


@pytest.mark.asyncio
async def test_schema_reapplies_cleanly(database):
    await ensure_schema(database)
