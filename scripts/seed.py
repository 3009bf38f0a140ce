#!/usr/bin/env python3
"""
Seed the board window for local use.

Creates zeroed HVAC + PLUMBING records for yesterday through +3 days, and
placeholder weather for today..+2 where none is stored yet. Existing rows are
never overwritten, so this is safe to re-run.

Usage:
    python scripts/seed.py                 # create tables (SQLite) + seed
    python scripts/seed.py --no-weather    # records only
    python scripts/seed.py --fetch-weather # pull real weather instead of placeholders

Requires: DATABASE_URL set (or defaults to sqlite:///local.db).
"""
import argparse
import logging
import os
import sys
from datetime import timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from callboard.database import get_session, init_db
from callboard.logging_config import configure_logging
from callboard.services.calculations import board_today, board_zone, evaluation_instant
from callboard.services.records import seed_board_window
from callboard.services.weather import refresh_weather, seed_placeholder_weather

logger = logging.getLogger('scripts.seed')


def main(argv=None):
    parser = argparse.ArgumentParser(description='Seed the call board window.')
    parser.add_argument('--no-weather', action='store_true', help='skip weather seeding')
    parser.add_argument('--fetch-weather', action='store_true', help='fetch live weather instead of placeholders')
    parser.add_argument('--skip-create', action='store_true', help='do not create tables (schema managed by Alembic)')
    args = parser.parse_args(argv)

    configure_logging()

    if not args.skip_create:
        init_db()

    now = evaluation_instant()
    tz = board_zone()
    today = board_today(now, tz)

    session = get_session()
    try:
        created = seed_board_window(session, today)
        print(f"Created {created} day record(s) for {today - timedelta(days=1)} .. {today + timedelta(days=3)}")

        if args.fetch_weather:
            result = refresh_weather(session, now, tz, force=True)
            print(f"Stored {len(result.entries)} weather day(s) from {result.source}")
        elif not args.no_weather:
            seeded = seed_placeholder_weather(session, today, now)
            print(f"Created {seeded} placeholder weather day(s)")
    finally:
        session.close()

    print("Seeding completed!")


if __name__ == '__main__':
    main()
