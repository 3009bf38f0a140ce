"""
Unlock routes — open, inspect and end the yesterday-unlock window.
"""
import logging
from flask import Blueprint, jsonify, request

from callboard.database import get_session
from callboard.errors import ApiError
from callboard.services.calculations import evaluation_instant
from callboard.services.unlock import (
    create_unlock_session,
    end_unlock_sessions,
    get_active_unlock_session,
    serialize_unlock_session,
)

logger = logging.getLogger('routes.unlock')

bp = Blueprint('unlock', __name__)


@bp.route('/api/unlock', methods=['GET'])
def get_unlock():
    now = evaluation_instant()
    session = get_session()
    try:
        active = get_active_unlock_session(session, now)
        return jsonify({'unlockSession': serialize_unlock_session(active, now)})
    except Exception as e:
        logger.error("Unlock lookup error: %s", e, exc_info=True)
        return jsonify({'error': 'Failed to read unlock session', 'code': 'SERVER_ERROR', 'details': str(e)}), 500
    finally:
        session.close()


@bp.route('/api/unlock', methods=['POST'])
def create_unlock():
    """Body (optional): {minutes, unlockedBy}."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    now = evaluation_instant()

    session = get_session()
    try:
        unlock_session = create_unlock_session(
            session, now,
            minutes=payload.get('minutes'),
            unlocked_by=payload.get('unlockedBy'),
        )
        return jsonify({
            'success': True,
            'unlockSession': serialize_unlock_session(unlock_session, now),
        }), 201
    except ApiError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        logger.error("Unlock error: %s", e, exc_info=True)
        return jsonify({'error': 'Failed to unlock day', 'code': 'UNLOCK_ERROR', 'details': str(e)}), 500
    finally:
        session.close()


@bp.route('/api/unlock', methods=['DELETE'])
def end_unlock():
    now = evaluation_instant()

    session = get_session()
    try:
        ended = end_unlock_sessions(session, now)
        return jsonify({'success': True, 'ended': ended})
    except Exception as e:
        session.rollback()
        logger.error("Unlock end error: %s", e, exc_info=True)
        return jsonify({'error': 'Failed to end unlock session', 'code': 'UNLOCK_ERROR', 'details': str(e)}), 500
    finally:
        session.close()
