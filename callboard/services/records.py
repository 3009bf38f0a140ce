"""
Day records — request validation, lock-checked upsert, seeding, serialization.

The lock check at write time uses the same live predicate as the read path
(yesterday + no active unlock session); nothing about locking is persisted.
"""
import logging
from datetime import date, datetime

from callboard.config import BOARD_TYPES
from callboard.database import get_or_create
from callboard.errors import ValidationError, DayLockedError
from callboard.models.day_record import DayRecord
from callboard.services.calculations import (
    as_utc,
    aged_percent,
    board_today,
    board_zone,
    clamp_count,
    is_greyed,
    is_locked,
    min_goal,
    to_board_date,
    variance,
    window_dates,
)
from callboard.services.unlock import get_active_unlock_session

logger = logging.getLogger('services.records')

# request field → column
COUNT_FIELDS = {
    'techCount': 'tech_count',
    'actualJobs': 'actual_jobs',
    'agedOpps': 'aged_opps',
}

# min_goal (3 x tech count) must still fit a 32-bit INTEGER column
MAX_COUNT = (2 ** 31 - 1) // 3


# ── Validation ───────────────────────────────────────────────────────────────

def parse_board_type(value):
    if value not in BOARD_TYPES:
        raise ValidationError('Invalid boardType. Must be HVAC or PLUMBING')
    return value


def parse_board_date(value, tz=None):
    """Accept 'YYYY-MM-DD' or a full ISO-8601 datetime; return a board-zone date."""
    if not isinstance(value, str):
        raise ValidationError('Invalid date format')
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
        return to_board_date(parsed, tz)
    except (ValueError, OverflowError):
        # OverflowError: offsets that push the date past year 1 or 9999
        raise ValidationError('Invalid date format')


def parse_count(name, value):
    """Validate an optional count. None means 'not provided'."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f'{name} must be a whole number')
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f'{name} must be a whole number')
    if value > MAX_COUNT:
        raise ValidationError(f'{name} is out of range')
    return clamp_count(int(value))


# ── Serialization ────────────────────────────────────────────────────────────

def serialize_day(record, day, today, unlock_session, now, tz=None):
    """DayData for one board cell. A missing record reads as all zeros, id None."""
    tech_count = record.tech_count if record else 0
    actual_jobs = record.actual_jobs if record else 0
    aged_opps = record.aged_opps if record else 0
    goal = min_goal(tech_count)
    locked = is_locked(day, today, unlock_session, now, tz)
    return {
        'id': record.id if record else None,
        'techCount': tech_count,
        'actualJobs': actual_jobs,
        'agedOpps': aged_opps,
        'minGoal': goal,
        'variance': variance(actual_jobs, goal),
        'agedPercent': aged_percent(aged_opps, actual_jobs),
        'locked': locked,
        'greyed': is_greyed(day, today, tz),
        'editable': not locked,
    }


def serialize_record(record, today, unlock_session, now, tz=None):
    """Persisted record as returned by the update endpoint."""
    data = serialize_day(record, record.date, today, unlock_session, now, tz)
    data.update({
        'boardType': record.board_type,
        'date': record.date.isoformat(),
        'updatedAt': as_utc(record.updated_at).isoformat() if record.updated_at else None,
    })
    return data


# ── Writes ───────────────────────────────────────────────────────────────────

def update_day_record(session, payload, now, tz=None):
    """
    Apply a partial update to one (board type, date) record.

    Provided counts are clamped at 0 and merged over the stored values
    (missing ones default to 0); derived fields are recomputed from the
    merged set. Raises ValidationError or DayLockedError without writing.
    """
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')

    tz = tz or board_zone()
    raw_date = payload.get('date')
    raw_board_type = payload.get('boardType')
    if not raw_date or not raw_board_type:
        raise ValidationError('Missing required fields: date, boardType')

    board_type = parse_board_type(raw_board_type)
    day = parse_board_date(raw_date, tz)
    updates = {}
    for field, column in COUNT_FIELDS.items():
        value = parse_count(field, payload.get(field))
        if value is not None:
            updates[column] = value

    today = board_today(now, tz)
    active = get_active_unlock_session(session, now)
    if is_locked(day, today, active, now, tz):
        logger.info("Rejected update to locked %s record for %s", board_type, day)
        raise DayLockedError('Cannot update locked day')

    record = get_or_create(
        session, DayRecord,
        defaults={'tech_count': 0, 'actual_jobs': 0, 'aged_opps': 0},
        board_type=board_type, date=day,
    )

    for column in COUNT_FIELDS.values():
        merged = updates.get(column, getattr(record, column))
        setattr(record, column, merged or 0)

    record.min_goal = min_goal(record.tech_count)
    record.variance = variance(record.actual_jobs, record.min_goal)
    record.aged_percent = aged_percent(record.aged_opps, record.actual_jobs)
    record.updated_at = as_utc(now)

    session.commit()
    logger.info(
        "Updated %s %s: techs=%d jobs=%d aged=%d",
        board_type, day, record.tech_count, record.actual_jobs, record.aged_opps,
    )
    return record


def seed_board_window(session, today):
    """Create zeroed records for both board types across the window.

    Existing rows are left alone. Returns the number of rows created.
    """
    created = 0
    for day in window_dates(today):
        for board_type in BOARD_TYPES:
            exists = session.query(DayRecord.id).filter_by(board_type=board_type, date=day).first()
            if exists:
                continue
            session.add(DayRecord(
                board_type=board_type,
                date=day,
                tech_count=0,
                actual_jobs=0,
                aged_opps=0,
                min_goal=0,
                variance=0,
                aged_percent=0.0,
            ))
            created += 1
    session.commit()
    logger.info("Seeded %d day record(s) around %s", created, today)
    return created
