"""
Day routes — single-record updates from the board's inline editor.
"""
import logging
from flask import Blueprint, jsonify, request

from callboard.database import get_session
from callboard.errors import ApiError, ValidationError
from callboard.services.calculations import board_today, board_zone, evaluation_instant
from callboard.services.records import serialize_record, update_day_record
from callboard.services.unlock import get_active_unlock_session

logger = logging.getLogger('routes.day')

bp = Blueprint('day', __name__)


@bp.route('/api/day/update', methods=['POST'])
def update_day():
    """Body: {date, boardType, techCount?, actualJobs?, agedOpps?}."""
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError('Request body must be JSON')

    now = evaluation_instant()
    tz = board_zone()

    session = get_session()
    try:
        record = update_day_record(session, payload, now, tz)
        active = get_active_unlock_session(session, now)
        data = serialize_record(record, board_today(now, tz), active, now, tz)
        return jsonify({
            'success': True,
            'data': data,
            'message': 'Day record updated successfully',
        })
    except ApiError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        logger.error("Day update error: %s", e, exc_info=True)
        return jsonify({'error': 'Failed to update day record', 'code': 'UPDATE_ERROR', 'details': str(e)}), 500
    finally:
        session.close()
