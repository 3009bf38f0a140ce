"""
DayRecord model — one row per (board type, calendar date).

Lock state is intentionally absent: it is derived from the date and the
active unlock session every time it is needed.
"""
from sqlalchemy import Column, Integer, Text, Float, Date, DateTime, UniqueConstraint
from sqlalchemy.sql import func

from callboard.database import Base


class DayRecord(Base):
    __tablename__ = 'day_records'
    __table_args__ = (
        UniqueConstraint('board_type', 'date', name='uq_day_record_board_type_date'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    board_type = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    tech_count = Column(Integer, nullable=False, default=0)
    actual_jobs = Column(Integer, nullable=False, default=0)
    aged_opps = Column(Integer, nullable=False, default=0)
    min_goal = Column(Integer, nullable=False, default=0)
    variance = Column(Integer, nullable=False, default=0)
    aged_percent = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f'<DayRecord {self.board_type} {self.date}>'
