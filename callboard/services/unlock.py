"""
Unlock sessions — time-boxed grants that lift the lock on yesterday's record.

At most one session is live at a time: opening a new one ends the others.
"""
import logging
from datetime import timedelta

from callboard.config import UNLOCK_MINUTES, UNLOCK_MAX_MINUTES
from callboard.errors import ValidationError
from callboard.models.unlock_session import UnlockSession
from callboard.services.calculations import as_utc, remaining_seconds, unlock_is_active

logger = logging.getLogger('services.unlock')


def get_active_unlock_session(session, now):
    """Most recent session whose expiry is strictly after `now`, or None."""
    return session.query(UnlockSession).filter(
        UnlockSession.expires_at > as_utc(now),
    ).order_by(UnlockSession.unlocked_at.desc(), UnlockSession.id.desc()).first()


def serialize_unlock_session(unlock_session, now):
    """Client view of a session: absolute expiry + clamped seconds remaining."""
    if not unlock_is_active(unlock_session, now):
        return None
    return {
        'unlockedUntil': as_utc(unlock_session.expires_at).isoformat(),
        'remainingSeconds': remaining_seconds(unlock_session.expires_at, now),
    }


def _parse_minutes(minutes):
    if minutes is None:
        return UNLOCK_MINUTES
    if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
        raise ValidationError('minutes must be a whole number')
    if isinstance(minutes, float) and not minutes.is_integer():
        raise ValidationError('minutes must be a whole number')
    minutes = int(minutes)
    if not 1 <= minutes <= UNLOCK_MAX_MINUTES:
        raise ValidationError(f'minutes must be between 1 and {UNLOCK_MAX_MINUTES}')
    return minutes


def end_unlock_sessions(session, now):
    """Expire every live session at `now`. Returns how many were ended."""
    now = as_utc(now)
    live = session.query(UnlockSession).filter(UnlockSession.expires_at > now).all()
    for unlock_session in live:
        unlock_session.expires_at = now
    session.commit()
    if live:
        logger.info("Ended %d unlock session(s)", len(live))
    return len(live)


def create_unlock_session(session, now, minutes=None, unlocked_by=None):
    """Open a new unlock session lasting `minutes` (default UNLOCK_MINUTES)."""
    minutes = _parse_minutes(minutes)
    if unlocked_by is not None and not isinstance(unlocked_by, str):
        raise ValidationError('unlockedBy must be a string')
    now = as_utc(now)

    for live in session.query(UnlockSession).filter(UnlockSession.expires_at > now).all():
        live.expires_at = now

    unlock_session = UnlockSession(
        unlocked_at=now,
        expires_at=now + timedelta(minutes=minutes),
        unlocked_by=(unlocked_by or None),
    )
    session.add(unlock_session)
    session.commit()
    logger.info("Yesterday unlocked for %d minutes (by %s)", minutes, unlocked_by or 'unknown')
    return unlock_session
