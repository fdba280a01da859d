import enum

from sqlalchemy import BigInteger, Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from minakami.db.base import Base


class CallType(str, enum.Enum):
    incoming = "incoming"
    outgoing = "outgoing"
    missed = "missed"


class CallLog(Base):
    __tablename__ = "call_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    phone_number: Mapped[str] = mapped_column(Text, nullable=False)
    contact_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    call_type: Mapped[str] = mapped_column(Text, nullable=False)
    call_date: Mapped[int] = mapped_column(BigInteger, nullable=False, comment="epoch ms")
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="seconds")
    is_analyzed: Mapped[bool | None] = mapped_column(Boolean, server_default="0")
