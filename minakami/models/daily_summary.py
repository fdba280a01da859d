from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from minakami.db.base import Base


class DailySummary(Base):
    """
    Per-day aggregate written by the summary pipeline.

    most_visited_location points at locations.id and is read through a
    LEFT JOIN (the location may have been deleted since).
    summary_data: JSON-encoded dict.
    """

    __tablename__ = "daily_summaries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    morning_activity: Mapped[str | None] = mapped_column(Text, nullable=True)
    afternoon_activity: Mapped[str | None] = mapped_column(Text, nullable=True)
    evening_activity: Mapped[str | None] = mapped_column(Text, nullable=True)
    night_activity: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_steps: Mapped[int | None] = mapped_column(Integer, server_default="0")
    total_active_time: Mapped[int | None] = mapped_column(Integer, server_default="0")
    most_visited_location: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("locations.id"), nullable=True
    )
    most_called_contact: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary_data: Mapped[str | None] = mapped_column(Text, nullable=True)
