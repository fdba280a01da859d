from sqlalchemy import BigInteger, Float, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from minakami.db.base import Base


class Location(Base):
    """A known place. visit_count starts at 1 and only ever grows."""

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="epoch ms")
    accuracy: Mapped[float | None] = mapped_column(Float, nullable=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    visit_count: Mapped[int | None] = mapped_column(Integer, server_default="1")
    last_visited: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
