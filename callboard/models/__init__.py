"""ORM models — importing this package registers every table on Base.metadata."""
from callboard.models.day_record import DayRecord
from callboard.models.weather import WeatherSnapshot
from callboard.models.unlock_session import UnlockSession

__all__ = ['DayRecord', 'WeatherSnapshot', 'UnlockSession']
