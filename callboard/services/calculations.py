"""
Board arithmetic — day offsets, targets, lock/grey predicates, derived counts.

Everything here is pure. Callers take the evaluation instant once per request
(evaluation_instant()), turn it into the board's "today" with board_today(),
and pass both down so a request straddling midnight sees one consistent day.
"""
import math
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from callboard.config import BOARD_TIMEZONE, DAY_TARGETS, WINDOW_OFFSETS


def evaluation_instant() -> datetime:
    """Current instant, timezone-aware in UTC."""
    return datetime.now(timezone.utc)


def board_zone(name: str = None) -> ZoneInfo:
    return ZoneInfo(name or BOARD_TIMEZONE)


def as_utc(value: datetime) -> datetime:
    """Normalize to aware UTC. Naive values are taken as UTC (SQLite drops tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def board_today(now: datetime, tz: ZoneInfo = None) -> date:
    """Calendar date of `now` in the board's reference time zone."""
    return as_utc(now).astimezone(tz or board_zone()).date()


def to_board_date(value, tz: ZoneInfo = None) -> date:
    """Truncate a date or datetime to a calendar date in the reference zone.

    Aware datetimes are converted first; naive ones are already wall-clock
    board time.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(tz or board_zone()).date()
    return value


# ── Date / target calculator ─────────────────────────────────────────────────

def day_offset(target, today: date, tz: ZoneInfo = None) -> int:
    """Signed whole-day distance from `today` to `target`."""
    return (to_board_date(target, tz) - today).days


def target_for_offset(offset: int) -> int:
    """Target percentage for a day offset. Only -1..3 carry a target."""
    return DAY_TARGETS.get(offset, 0)


def window_dates(today: date):
    """The five board dates, yesterday through +3."""
    return [today + timedelta(days=offset) for offset in WINDOW_OFFSETS]


def unlock_is_active(unlock_session, now: datetime) -> bool:
    if unlock_session is None or unlock_session.expires_at is None:
        return False
    return as_utc(unlock_session.expires_at) > as_utc(now)


def is_locked(target, today: date, unlock_session, now: datetime, tz: ZoneInfo = None) -> bool:
    """Yesterday is locked unless an unlock session is still live. No other day locks."""
    if day_offset(target, today, tz) != -1:
        return False
    return not unlock_is_active(unlock_session, now)


def is_greyed(target, today: date, tz: ZoneInfo = None) -> bool:
    """Display hint for the farthest forecast day."""
    return day_offset(target, today, tz) == 3


def is_editable(target, today: date, unlock_session, now: datetime, tz: ZoneInfo = None) -> bool:
    return not is_locked(target, today, unlock_session, now, tz)


def remaining_seconds(expires_at: datetime, now: datetime) -> int:
    """Whole seconds left before `expires_at`, never negative."""
    delta = (as_utc(expires_at) - as_utc(now)).total_seconds()
    return max(0, math.floor(delta))


# ── Record derivation ────────────────────────────────────────────────────────

def clamp_count(value) -> int:
    return max(0, int(value or 0))


def min_goal(tech_count: int) -> int:
    return tech_count * 3


def variance(actual_jobs: int, goal: int) -> int:
    return actual_jobs - goal


def aged_percent(aged_opps: int, actual_jobs: int) -> float:
    # Early in the day actual_jobs is legitimately 0; that reads as 0%, not an error.
    if actual_jobs == 0:
        return 0
    return (aged_opps / actual_jobs) * 100
