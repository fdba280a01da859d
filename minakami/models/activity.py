from sqlalchemy import BigInteger, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from minakami.db.base import Base


class Activity(Base):
    """
    One tracked activity (manual entry, health import or Strava sync).

    strava_id is NOT unique at the schema level: importers must call
    find_activity_by_strava_id before inserting.
    """

    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    start_time: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="epoch ms")
    end_time: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    duration: Mapped[int | None] = mapped_column(BigInteger, nullable=True, comment="ms")
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str | None] = mapped_column(String(32), server_default="manual")
    activity_metadata: Mapped[str | None] = mapped_column(
        "metadata", Text, nullable=True,
        comment="JSON-encoded dict",
    )
    calories: Mapped[int | None] = mapped_column(Integer, server_default="0")
    distance: Mapped[float | None] = mapped_column(Float, server_default="0")
    sport_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    strava_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    heart_rate_avg: Mapped[int | None] = mapped_column(Integer, nullable=True)
    heart_rate_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    elevation_gain: Mapped[float | None] = mapped_column(Float, server_default="0")
