from .engine import Database
from .models import Base, Repository
from .schema import ensure_schema, load_schema
from .upsert import BatchUpserter, build_upsert_statement

__all__ = [
    "Base",
    "BatchUpserter",
    "Database",
    "Repository",
    "build_upsert_statement",
    "ensure_schema",
    "load_schema",
]
