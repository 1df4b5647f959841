from functools import lru_cache
from urllib.parse import quote

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from repostore.records import RepositoryRow

# PostgreSQL caps one statement at 65535 bind parameters
MAX_CHUNK_SIZE = 65535 // len(RepositoryRow._fields)


class Settings(BaseSettings):
    """App-wide configuration pulled from environment variables or .env."""

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_pass: str = "postgres"
    db_name: str = "github_data"
    db_pool_size: int = Field(default=10, ge=1)
    db_echo: bool = False

    # Schema bootstrap; None means the schema.sql shipped with the package
    schema_path: str | None = None

    # Rows per INSERT statement. All chunks of one batch share a transaction.
    upsert_chunk_size: int = Field(default=5000, ge=1, le=MAX_CHUNK_SIZE)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def db_url(self) -> str:
        return (
            f"postgresql+psycopg://{quote(self.db_user, safe='')}:{quote(self.db_pass, safe='')}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    return Settings()
