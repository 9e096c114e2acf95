"""
SQLAlchemy ORM models for persistent storage.

The wallet keeps its whole collection in one named slot, so the schema
is a single key/value table rather than a table per card.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class StorageSlotDB(Base):
    """
    One named durable slot.

    value holds the serialized document (a JSON array of card records).
    """

    __tablename__ = "storage_slots"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<StorageSlotDB(key={self.key}, size={len(self.value)})>"
