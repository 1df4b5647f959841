"""Schema bootstrap, applied once at startup."""
import logging
from importlib import resources

from .engine import Database

logger = logging.getLogger(__name__)


def load_schema(path: str | None = None) -> str:
    """Read the schema SQL from ``path`` or from the packaged schema.sql."""
    if path is None:
        return resources.files("repostore.db").joinpath("schema.sql").read_text(encoding="utf-8")
    with open(path, encoding="utf-8") as f:
        return f.read()


def split_statements(sql: str) -> list[str]:
    statements = []
    for chunk in sql.split(";"):
        code = [line for line in chunk.splitlines() if line.strip() and not line.strip().startswith("--")]
        if code:
            statements.append("\n".join(code))
    return statements


async def ensure_schema(database: Database, path: str | None = None) -> None:
    """Apply every schema statement in a single transaction."""
    statements = split_statements(load_schema(path))
    async with database.acquire() as conn:
        async with conn.begin():
            for statement in statements:
                await conn.exec_driver_sql(statement)
    logger.info(f"Schema applied ({len(statements)} statements)")
