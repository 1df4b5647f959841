from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RepositoryRow(NamedTuple):
    """Bound values for one row of the ``repositories`` table, in column order."""

    node_id: str
    database_id: Optional[int]
    name: str
    owner: str
    stars: int
    url: str


class RepositoryRecord(BaseModel):
    """One repository as submitted for ingestion.

    Accepts GitHub GraphQL field names (``nodeId``, ``starCount`` ...) as well
    as the snake_case attribute names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    node_id: str = Field(alias="nodeId", min_length=1)
    database_id: Optional[int] = Field(default=None, alias="databaseId")
    name: str
    owner: str
    star_count: int = Field(default=0, alias="starCount", ge=0)
    url: str

    @field_validator("star_count", mode="before")
    @classmethod
    def _null_stars(cls, value):
        # GraphQL sends an explicit null for hidden counts
        return 0 if value is None else value

    def as_row(self) -> RepositoryRow:
        return RepositoryRow(
            node_id=self.node_id,
            database_id=self.database_id,
            name=self.name,
            owner=self.owner,
            stars=self.star_count,
            url=self.url,
        )
