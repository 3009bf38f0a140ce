"""
UnlockSession model — a time-boxed grant that lifts yesterday's edit lock.
"""
from sqlalchemy import Column, Integer, Text, DateTime

from callboard.database import Base


class UnlockSession(Base):
    __tablename__ = 'unlock_sessions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    unlocked_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    unlocked_by = Column(Text, nullable=True)
