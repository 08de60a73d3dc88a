from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text
from .session import Base


class StorageSlot(Base):
    """Named slot holding one JSON document (e.g. the leaderboard)."""
    __tablename__ = "storage_slots"
    
    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
