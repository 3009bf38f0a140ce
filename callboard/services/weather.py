"""
Weather — wttr.in forecast fetch, fallback synthesis, and the DB cache.

The board shows low/high temperatures for today and the next two days. A
fetch failure never fails a request: the fallback provider synthesizes
plausible values instead. Refreshes are gated on the age of the newest stored
snapshot, so calling refresh_weather() redundantly (cron + page loads) is safe.
"""
import logging
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional
from urllib.parse import quote

import requests
from sqlalchemy import func

from callboard.config import (
    WEATHER_API_URL,
    WEATHER_LOCATION,
    WEATHER_OFFSETS,
    WEATHER_REFRESH_SECONDS,
    WEATHER_TIMEOUT,
    WEATHER_USER_AGENT,
)
from callboard.database import get_or_create
from callboard.models.weather import WeatherSnapshot
from callboard.services.calculations import as_utc, board_today, board_zone

logger = logging.getLogger('services.weather')

SOURCE_WTTR = 'web_scrape_wttr'
SOURCE_FALLBACK = 'fallback'

WINTER_CONDITIONS = ['Cloudy', 'Light Rain', 'Overcast', 'Partly Cloudy', 'Showers', 'Drizzle']


@dataclass
class WeatherEntry:
    date: date
    temp_low: float
    temp_high: float
    description: str

    def to_dict(self):
        return {
            'date': self.date.isoformat(),
            'tempLow': self.temp_low,
            'tempHigh': self.temp_high,
            'description': self.description,
        }


@dataclass
class WeatherRefresh:
    refreshed: bool
    source: Optional[str] = None
    entries: List[WeatherEntry] = field(default_factory=list)


class FallbackWeatherProvider:
    """
    Synthesizes North Vancouver-ish winter weather.

    Pass a seeded random.Random to get a fixed sequence in tests.
    """

    base_temp = 5

    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def generate(self, day):
        """A full fallback day: base 5°C ± 3, random winter condition."""
        swing = (self.rng.random() - 0.5) * 6
        return WeatherEntry(
            date=day,
            temp_low=round(self.base_temp + swing - 2),
            temp_high=round(self.base_temp + swing + 3),
            description=self.rng.choice(WINTER_CONDITIONS),
        )

    def pad(self, day):
        """Filler for a day the upstream forecast did not cover."""
        return WeatherEntry(
            date=day,
            temp_low=3 + self.rng.randrange(3),
            temp_high=7 + self.rng.randrange(4),
            description='Cloudy',
        )

    def forecast(self, today):
        return [self.generate(today + timedelta(days=offset)) for offset in WEATHER_OFFSETS]


# ── Fetch ────────────────────────────────────────────────────────────────────

def _weather_url(location=None):
    return f"{WEATHER_API_URL}/{quote(location or WEATHER_LOCATION)}?format=j1"


def _description(weather_desc):
    if weather_desc and isinstance(weather_desc, list):
        return weather_desc[0].get('value') or 'Unknown'
    return 'Unknown'


def parse_wttr(data, today, provider):
    """
    Turn a wttr.in j1 payload into exactly one entry per weather offset.

    Today starts from the current temperature ± 2 and is then replaced by the
    day-0 forecast min/max when present. Days the payload misses are padded.
    """
    entries = {}

    current_conditions = data.get('current_condition') or []
    if current_conditions:
        current = current_conditions[0]
        temp = round(float(current['temp_C']))
        entries[today] = WeatherEntry(
            date=today,
            temp_low=temp - 2,
            temp_high=temp + 2,
            description=_description(current.get('weatherDesc')),
        )

    for index, day in enumerate((data.get('weather') or [])[:len(WEATHER_OFFSETS)]):
        day_date = today + timedelta(days=index)
        low = round(float(day['mintempC']))
        high = round(float(day['maxtempC']))
        if day_date in entries:
            entries[day_date].temp_low = low
            entries[day_date].temp_high = high
            continue
        hourly = day.get('hourly') or [{}]
        entries[day_date] = WeatherEntry(
            date=day_date,
            temp_low=low,
            temp_high=high,
            description=_description(hourly[0].get('weatherDesc')),
        )

    result = []
    for offset in WEATHER_OFFSETS:
        day_date = today + timedelta(days=offset)
        result.append(entries.get(day_date) or provider.pad(day_date))
    return result


def fetch_forecast(today, provider=None, location=None):
    """
    Fetch today..+2 from wttr.in.

    Returns (entries, source). Any failure (network, HTTP status, malformed
    payload) falls back to the provider's synthesized forecast.
    """
    provider = provider or FallbackWeatherProvider()
    url = _weather_url(location)
    try:
        response = requests.get(url, headers={'User-Agent': WEATHER_USER_AGENT}, timeout=WEATHER_TIMEOUT)
        response.raise_for_status()
        entries = parse_wttr(response.json(), today, provider)
        logger.info("Fetched %d day(s) of weather from wttr.in", len(entries))
        return entries, SOURCE_WTTR
    except Exception as e:
        logger.warning("Weather fetch failed (%s), using fallback values", e, exc_info=True)
        return provider.forecast(today), SOURCE_FALLBACK


# ── Store ────────────────────────────────────────────────────────────────────

def store_weather(session, entries, now, source=SOURCE_WTTR):
    """Upsert one snapshot per entry date (last write wins)."""
    fetched_at = as_utc(now)
    for entry in entries:
        raw = {
            'description': entry.description,
            'fetchedAt': fetched_at.isoformat(),
            'source': source,
        }
        snapshot = get_or_create(
            session, WeatherSnapshot,
            defaults={'temp_low': entry.temp_low, 'temp_high': entry.temp_high, 'raw': raw, 'fetched_at': fetched_at},
            date=entry.date,
        )
        snapshot.temp_low = entry.temp_low
        snapshot.temp_high = entry.temp_high
        snapshot.raw = raw
        snapshot.fetched_at = fetched_at
    session.commit()


def last_fetched_at(session):
    return session.query(func.max(WeatherSnapshot.fetched_at)).scalar()


def weather_is_stale(last_fetched, now):
    if last_fetched is None:
        return True
    age = (as_utc(now) - as_utc(last_fetched)).total_seconds()
    return age > WEATHER_REFRESH_SECONDS


def refresh_weather(session, now, tz=None, force=False, provider=None):
    """Fetch + store when forced or when the newest snapshot is over an hour old."""
    if not force and not weather_is_stale(last_fetched_at(session), now):
        return WeatherRefresh(refreshed=False)

    today = board_today(now, tz or board_zone())
    entries, source = fetch_forecast(today, provider=provider)
    store_weather(session, entries, now, source=source)
    logger.info("Stored %d weather snapshot(s) from %s", len(entries), source)
    return WeatherRefresh(refreshed=True, source=source, entries=entries)


def get_weather_map(session, today):
    """Stored weather for today..+2 keyed by ISO date."""
    dates = [today + timedelta(days=offset) for offset in WEATHER_OFFSETS]
    rows = session.query(WeatherSnapshot).filter(
        WeatherSnapshot.date.in_(dates),
    ).order_by(WeatherSnapshot.date.asc()).all()

    return {
        row.date.isoformat(): {
            'low': row.temp_low,
            'high': row.temp_high,
            'description': row.description,
            'lastUpdated': as_utc(row.fetched_at).isoformat(),
        }
        for row in rows
    }


def seed_placeholder_weather(session, today, now, provider=None):
    """Store fallback weather for weather days that have no snapshot yet.

    Existing snapshots are left alone. Returns the number of days created.
    """
    provider = provider or FallbackWeatherProvider()
    missing = []
    for offset in WEATHER_OFFSETS:
        day = today + timedelta(days=offset)
        if session.query(WeatherSnapshot.id).filter_by(date=day).first() is None:
            missing.append(provider.generate(day))
    if missing:
        store_weather(session, missing, now, source=SOURCE_FALLBACK)
    return len(missing)
