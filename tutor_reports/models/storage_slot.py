"""Key-value slot model backing the local report store."""

from datetime import datetime

from sqlalchemy import String, Text, TIMESTAMP, func
from sqlalchemy.orm import Mapped, mapped_column
from tutor_reports.database import Base


class StorageSlot(Base):
    """One named slot holding a serialized payload (e.g. the report collection)."""

    __tablename__ = "storage_slots"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<StorageSlot(key='{self.key}', size={len(self.value or '')})>"
