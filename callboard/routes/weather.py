"""
Weather routes — cached read, forced refresh, scheduler hook.

The scheduler calls /api/cron/weather with 'Authorization: Bearer <CRON_SECRET>';
the gate in create_app() accepts that in place of the URL key.
"""
import logging
from flask import Blueprint, jsonify

from callboard.database import get_session
from callboard.services.calculations import as_utc, board_today, board_zone, evaluation_instant
from callboard.services.weather import get_weather_map, last_fetched_at, refresh_weather

logger = logging.getLogger('routes.weather')

bp = Blueprint('weather', __name__)


@bp.route('/api/weather', methods=['GET'])
def get_weather():
    """Refresh if the cache is over an hour old, then return today..+2."""
    now = evaluation_instant()
    tz = board_zone()

    session = get_session()
    try:
        refresh_weather(session, now, tz)
        last = last_fetched_at(session)
        return jsonify({
            'weather': get_weather_map(session, board_today(now, tz)),
            'lastUpdated': as_utc(last or now).isoformat(),
            'source': 'web_scrape',
        })
    except Exception as e:
        session.rollback()
        logger.error("Weather API error: %s", e, exc_info=True)
        return jsonify({'error': 'Failed to fetch weather data', 'code': 'WEATHER_ERROR', 'details': str(e)}), 500
    finally:
        session.close()


@bp.route('/api/weather', methods=['POST'])
def force_update_weather():
    now = evaluation_instant()

    session = get_session()
    try:
        logger.info("Force updating weather data")
        result = refresh_weather(session, now, board_zone(), force=True)
        return jsonify({
            'success': True,
            'message': 'Weather data updated successfully',
            'updatedRecords': len(result.entries),
            'source': result.source,
        })
    except Exception as e:
        session.rollback()
        logger.error("Weather update error: %s", e, exc_info=True)
        return jsonify({'error': 'Failed to update weather data', 'code': 'WEATHER_UPDATE_ERROR', 'details': str(e)}), 500
    finally:
        session.close()


@bp.route('/api/cron/weather')
def cron_update_weather():
    """Scheduled refresh. Always fetches; safe to call more often than needed."""
    now = evaluation_instant()

    session = get_session()
    try:
        logger.info("Cron: updating weather data")
        result = refresh_weather(session, now, board_zone(), force=True)
        return jsonify({
            'success': True,
            'message': 'Weather data updated successfully',
            'updatedRecords': len(result.entries),
            'source': result.source,
            'data': [entry.to_dict() for entry in result.entries],
            'timestamp': as_utc(now).isoformat(),
        })
    except Exception as e:
        session.rollback()
        logger.error("Cron weather update error: %s", e, exc_info=True)
        return jsonify({'error': 'Failed to update weather data', 'code': 'WEATHER_CRON_ERROR', 'details': str(e)}), 500
    finally:
        session.close()
