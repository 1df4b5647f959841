from datetime import datetime
from sqlalchemy import BigInteger, CheckConstraint, Index, Integer, Text, TIMESTAMP, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

class Base(DeclarativeBase):
    pass  # shared metadata lives here

class Repository(Base):
    __tablename__ = "repositories"
    __table_args__ = (
        CheckConstraint("stars >= 0", name="repositories_stars_non_negative"),
        Index("idx_repositories_stars", "stars"),
        Index("idx_repositories_owner", "owner"),
    )

    node_id: Mapped[str] = mapped_column(Text, primary_key=True)
    database_id: Mapped[int | None] = mapped_column(BigInteger)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    owner: Mapped[str] = mapped_column(Text, nullable=False)
    stars: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
