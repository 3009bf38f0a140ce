"""
Board snapshot — the read-only projection behind GET /api/board and the page.

One evaluation instant drives every date, target, lock and grey decision in
the snapshot. Nothing here writes.
"""
from callboard.config import BOARD_TYPES
from callboard.models.day_record import DayRecord
from callboard.services.calculations import (
    as_utc,
    board_today,
    board_zone,
    day_offset,
    target_for_offset,
    window_dates,
)
from callboard.services.records import serialize_day
from callboard.services.unlock import get_active_unlock_session, serialize_unlock_session
from callboard.services.weather import get_weather_map


def build_board_snapshot(session, now, tz=None):
    tz = tz or board_zone()
    today = board_today(now, tz)
    dates = window_dates(today)

    records = session.query(DayRecord).filter(DayRecord.date.in_(dates)).all()
    by_key = {(r.board_type, r.date): r for r in records}
    active = get_active_unlock_session(session, now)

    snapshot = {
        'days': [d.isoformat() for d in dates],
        'targets': {d.isoformat(): target_for_offset(day_offset(d, today, tz)) for d in dates},
        'weather': get_weather_map(session, today),
        'unlockSession': serialize_unlock_session(active, now),
        'serverTime': as_utc(now).isoformat(),
    }
    for board_type in BOARD_TYPES:
        snapshot[board_type.lower()] = {
            d.isoformat(): serialize_day(by_key.get((board_type, d)), d, today, active, now, tz)
            for d in dates
        }
    return snapshot
