from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from EquipTrack.database import Base


def _utc_now():
    return datetime.now(timezone.utc)


class StorageItem(Base):
    __tablename__ = "storage_item"

    # Whole collections are stored as one JSON blob per key
    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now, nullable=False)

    def __repr__(self):
        return (
            f"StorageItem(key='{self.key}', size={len(self.value or '')}, "
            f"updated_at='{self.updated_at}')"
        )
