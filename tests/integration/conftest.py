import os

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from sqlalchemy import text

from repostore.config import Settings
from repostore.db import Database, ensure_schema

load_dotenv()


@pytest_asyncio.fixture
async def database():
    if not os.getenv("DB_HOST"):
        pytest.skip("DB_HOST not set")
    db = Database.from_settings(Settings())
    await db.init()
    await ensure_schema(db)
    async with db.acquire() as conn:
        await conn.execute(text("TRUNCATE TABLE repositories"))
        await conn.commit()
    yield db
    await db.shutdown()
