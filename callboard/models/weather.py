"""
WeatherSnapshot model — latest low/high forecast per calendar date.
"""
from sqlalchemy import Column, Integer, Float, Date, DateTime, JSON

from callboard.database import Base


class WeatherSnapshot(Base):
    __tablename__ = 'weather'

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, unique=True)
    temp_low = Column(Float, nullable=False)
    temp_high = Column(Float, nullable=False)
    raw = Column(JSON, nullable=False, default=dict)
    fetched_at = Column(DateTime(timezone=True), nullable=False, index=True)

    @property
    def description(self):
        return (self.raw or {}).get('description') or 'Cloudy'
