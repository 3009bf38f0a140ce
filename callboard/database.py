"""
Engine, session factory and declarative base for the board tables.

DATABASE_URL picks the backend: SQLite file for local runs, Postgres when
deployed. Routes open one session per request via get_session() and close it
themselves.
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from callboard.config import DATABASE_URL


logger = logging.getLogger('database')


class Base(DeclarativeBase):
    pass


def normalize_url(raw_url):
    """SQLAlchemy 2.x only accepts the postgresql:// scheme."""
    if raw_url.startswith('postgres://'):
        return 'postgresql://' + raw_url[len('postgres://'):]
    return raw_url


def engine_options(db_url):
    if db_url.startswith('sqlite'):
        # Flask's dev server handles requests on worker threads
        return {'connect_args': {'check_same_thread': False}}
    return {'pool_pre_ping': True, 'pool_size': 5, 'max_overflow': 10}


url = normalize_url(DATABASE_URL)
engine = create_engine(url, **engine_options(url))
SessionLocal = sessionmaker(bind=engine)


def get_session():
    """Return a new DB session. Caller closes it."""
    return SessionLocal()


def insert_or_fetch(session, model, defaults=None, **key):
    """
    Insert a `model` row for `key` inside a savepoint.

    If a concurrent writer committed the same unique key first, the savepoint
    is rolled back and their row is returned instead, so the caller can apply
    its values on top (last write wins).
    """
    try:
        with session.begin_nested():
            row = model(**key, **(defaults or {}))
            session.add(row)
        return row
    except IntegrityError:
        logger.info("Lost insert race on %s %s, updating existing row", model.__tablename__, key)
        return session.query(model).filter_by(**key).one()


def get_or_create(session, model, defaults=None, **key):
    """Row matching the unique `key`, created with `defaults` when missing."""
    row = session.query(model).filter_by(**key).first()
    if row is None:
        row = insert_or_fetch(session, model, defaults, **key)
    return row


def init_db(bind=None):
    """Create any missing tables. Used by scripts/seed.py on fresh SQLite files."""
    import callboard.models  # noqa: F401
    Base.metadata.create_all(bind or engine)
