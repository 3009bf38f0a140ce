"""Shared test fixtures."""
from datetime import date, datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from callboard.database import Base
from callboard.services.auth import SharedSecretVerifier

TEST_KEY = 'test-key'
CRON_TOKEN = 'cron-token'

BOARD_TZ = ZoneInfo('America/Vancouver')
# 10:00 PDT on Monday 2026-10-19
NOW = datetime(2026, 10, 19, 17, 0, tzinfo=timezone.utc)
TODAY = date(2026, 10, 19)
YESTERDAY = date(2026, 10, 18)

ROUTE_MODULES = [
    'callboard.routes.board',
    'callboard.routes.day',
    'callboard.routes.weather',
    'callboard.routes.unlock',
]


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    import callboard.models  # noqa: F401
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(db_session):
    """Route every route module's get_session() to the test session.

    close() is disabled so handlers closing the session in their finally
    blocks don't detach objects the test still inspects.
    """
    _real_close = db_session.close
    db_session.close = lambda: None
    patchers = [patch(f'{module}.get_session', return_value=db_session) for module in ROUTE_MODULES]
    for p in patchers:
        p.start()
    yield db_session
    for p in patchers:
        p.stop()
    db_session.close = _real_close


@pytest.fixture(autouse=True)
def frozen_clock():
    """Pin the evaluation instant and board zone for every route."""
    patchers = [
        patch(f'{module}.evaluation_instant', return_value=NOW)
        for module in ROUTE_MODULES
    ]
    patchers.append(patch('callboard.services.calculations.BOARD_TIMEZONE', 'America/Vancouver'))
    for p in patchers:
        p.start()
    yield NOW
    for p in patchers:
        p.stop()


@pytest.fixture
def app():
    """Flask test app with a fixed shared secret + cron token."""
    from callboard import create_app
    app = create_app(verifier=SharedSecretVerifier(TEST_KEY, CRON_TOKEN))
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_record(db_session):
    """Factory fixture: inserts a DayRecord with derived fields filled in."""
    from callboard.models.day_record import DayRecord
    from callboard.services.calculations import aged_percent, min_goal, variance

    def _make(board_type='HVAC', day=TODAY, tech_count=0, actual_jobs=0, aged_opps=0):
        goal = min_goal(tech_count)
        record = DayRecord(
            board_type=board_type,
            date=day,
            tech_count=tech_count,
            actual_jobs=actual_jobs,
            aged_opps=aged_opps,
            min_goal=goal,
            variance=variance(actual_jobs, goal),
            aged_percent=aged_percent(aged_opps, actual_jobs),
        )
        db_session.add(record)
        db_session.commit()
        return record
    return _make


@pytest.fixture
def make_unlock(db_session):
    """Factory fixture: inserts an UnlockSession expiring at `expires_at`."""
    from callboard.models.unlock_session import UnlockSession

    def _make(expires_at, unlocked_at=None):
        unlock_session = UnlockSession(
            unlocked_at=unlocked_at or NOW,
            expires_at=expires_at,
        )
        db_session.add(unlock_session)
        db_session.commit()
        return unlock_session
    return _make


@pytest.fixture
def wttr_payload():
    """A trimmed wttr.in ?format=j1 response."""
    return {
        'current_condition': [
            {'temp_C': '8', 'weatherDesc': [{'value': 'Light rain'}]},
        ],
        'weather': [
            {'mintempC': '5', 'maxtempC': '11', 'hourly': [{'weatherDesc': [{'value': 'Patchy rain'}]}]},
            {'mintempC': '4', 'maxtempC': '9', 'hourly': [{'weatherDesc': [{'value': 'Overcast'}]}]},
            {'mintempC': '6', 'maxtempC': '12', 'hourly': [{'weatherDesc': [{'value': 'Sunny'}]}]},
        ],
    }
