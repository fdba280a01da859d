import enum

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from minakami.db.base import Base


class UsageSource(str, enum.Enum):
    manual = "manual"
    android_usage_stats = "android_usage_stats"
    demo_usage = "demo_usage"


class AppUsage(Base):
    """One app session. session_date duplicates the local day of timestamp."""

    __tablename__ = "app_usage"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_name: Mapped[str] = mapped_column(Text, nullable=False)
    package_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int] = mapped_column(BigInteger, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="epoch ms")
    session_date: Mapped[str] = mapped_column(String(10), nullable=False, comment="YYYY-MM-DD")
    source: Mapped[str | None] = mapped_column(String(32), server_default="manual")
