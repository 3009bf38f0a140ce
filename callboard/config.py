"""
Centralized configuration — env vars and board constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Auth ─────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')
SECRET_URL_KEY = os.getenv('SECRET_URL_KEY', 'development-secret-key-replace-in-production')
CRON_SECRET = os.getenv('CRON_SECRET')

# ── Board ────────────────────────────────────────────────────────────────────
# All "today" computations happen in this zone, regardless of server TZ.
BOARD_TIMEZONE = os.getenv('BOARD_TIMEZONE', 'America/Vancouver')
UNLOCK_MINUTES = int(os.getenv('UNLOCK_MINUTES', '15'))
UNLOCK_MAX_MINUTES = 24 * 60

# ── Weather (wttr.in) ────────────────────────────────────────────────────────
WEATHER_API_URL = os.getenv('WEATHER_API_URL', 'https://wttr.in')
WEATHER_LOCATION = os.getenv('WEATHER_LOCATION', 'North Vancouver,Canada')
WEATHER_USER_AGENT = os.getenv('WEATHER_USER_AGENT', 'Mozilla/5.0 (compatible; 3DayCallBoard/1.0)')
WEATHER_TIMEOUT = int(os.getenv('WEATHER_TIMEOUT', '10'))
WEATHER_REFRESH_SECONDS = int(os.getenv('WEATHER_REFRESH_SECONDS', '3600'))

# ── Board types ──────────────────────────────────────────────────────────────
BOARD_TYPES = ['HVAC', 'PLUMBING']

# ── Day window ───────────────────────────────────────────────────────────────
WINDOW_OFFSETS = [-1, 0, 1, 2, 3]
WEATHER_OFFSETS = [0, 1, 2]

# ── Target percentage by day offset ──────────────────────────────────────────
DAY_TARGETS = {
    -1: 100,  # yesterday
    0: 100,
    1: 66,
    2: 33,
    3: 15,
}
