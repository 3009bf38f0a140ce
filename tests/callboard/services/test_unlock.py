"""Tests for callboard.services.unlock: live session lookup, creation, ending."""
from datetime import timedelta

import pytest

from callboard.errors import ValidationError
from callboard.models.unlock_session import UnlockSession
from callboard.services.calculations import as_utc
from callboard.services.unlock import (
    create_unlock_session,
    end_unlock_sessions,
    get_active_unlock_session,
    serialize_unlock_session,
)
from tests.conftest import NOW


class TestGetActiveUnlockSession:

    def test_none_when_table_empty(self, db_session):
        assert get_active_unlock_session(db_session, NOW) is None

    def test_returns_live_session(self, db_session, make_unlock):
        live = make_unlock(NOW + timedelta(minutes=5))
        assert get_active_unlock_session(db_session, NOW).id == live.id

    def test_ignores_expired(self, db_session, make_unlock):
        make_unlock(NOW - timedelta(minutes=1), unlocked_at=NOW - timedelta(minutes=16))
        assert get_active_unlock_session(db_session, NOW) is None

    def test_expiry_equal_to_now_is_not_live(self, db_session, make_unlock):
        make_unlock(NOW, unlocked_at=NOW - timedelta(minutes=15))
        assert get_active_unlock_session(db_session, NOW) is None

    def test_latest_unlock_wins(self, db_session, make_unlock):
        make_unlock(NOW + timedelta(minutes=30), unlocked_at=NOW - timedelta(minutes=10))
        newer = make_unlock(NOW + timedelta(minutes=5), unlocked_at=NOW - timedelta(minutes=1))
        assert get_active_unlock_session(db_session, NOW).id == newer.id


class TestSerializeUnlockSession:

    def test_thirty_seconds_remaining(self, make_unlock):
        unlock_session = make_unlock(NOW + timedelta(seconds=30))
        data = serialize_unlock_session(unlock_session, NOW)
        assert 0 < data['remainingSeconds'] <= 30
        assert data['remainingSeconds'] == 30
        assert data['unlockedUntil'] == (NOW + timedelta(seconds=30)).isoformat()

    def test_expired_is_none(self, make_unlock):
        unlock_session = make_unlock(NOW - timedelta(seconds=1))
        assert serialize_unlock_session(unlock_session, NOW) is None

    def test_none_is_none(self):
        assert serialize_unlock_session(None, NOW) is None


class TestCreateUnlockSession:

    def test_expires_after_requested_minutes(self, db_session):
        unlock_session = create_unlock_session(db_session, NOW, minutes=20, unlocked_by='dispatch')
        assert as_utc(unlock_session.expires_at) == NOW + timedelta(minutes=20)
        assert as_utc(unlock_session.unlocked_at) == NOW
        assert unlock_session.unlocked_by == 'dispatch'

    def test_default_duration(self, db_session):
        from callboard.services.unlock import UNLOCK_MINUTES
        unlock_session = create_unlock_session(db_session, NOW)
        assert as_utc(unlock_session.expires_at) == NOW + timedelta(minutes=UNLOCK_MINUTES)

    def test_new_session_ends_previous(self, db_session):
        first = create_unlock_session(db_session, NOW, minutes=30)
        later = NOW + timedelta(minutes=1)
        second = create_unlock_session(db_session, later, minutes=10)

        db_session.expire_all()
        assert as_utc(db_session.get(UnlockSession, first.id).expires_at) == later
        assert get_active_unlock_session(db_session, later).id == second.id
        live = db_session.query(UnlockSession).filter(UnlockSession.expires_at > later).count()
        assert live == 1

    @pytest.mark.parametrize('minutes', [0, -5, 24 * 60 + 1, 'ten', True, 1.5])
    def test_rejects_bad_duration(self, db_session, minutes):
        with pytest.raises(ValidationError):
            create_unlock_session(db_session, NOW, minutes=minutes)
        assert db_session.query(UnlockSession).count() == 0

    @pytest.mark.parametrize('unlocked_by', [{}, [1], 42])
    def test_rejects_non_string_unlocked_by(self, db_session, unlocked_by):
        with pytest.raises(ValidationError) as exc:
            create_unlock_session(db_session, NOW, minutes=5, unlocked_by=unlocked_by)
        assert exc.value.message == 'unlockedBy must be a string'
        assert db_session.query(UnlockSession).count() == 0


class TestEndUnlockSessions:

    def test_ends_live_sessions(self, db_session, make_unlock):
        make_unlock(NOW + timedelta(minutes=5))
        assert end_unlock_sessions(db_session, NOW) == 1
        assert get_active_unlock_session(db_session, NOW) is None

    def test_no_live_sessions(self, db_session, make_unlock):
        make_unlock(NOW - timedelta(minutes=5))
        assert end_unlock_sessions(db_session, NOW) == 0
