"""
Board routes — page, snapshot API, health check.
"""
import logging
from flask import Blueprint, jsonify, render_template, request

from callboard.database import get_session
from callboard.services.board import build_board_snapshot
from callboard.services.calculations import board_zone, evaluation_instant

logger = logging.getLogger('routes.board')

bp = Blueprint('board', __name__)


@bp.route('/')
def index():
    """Server-rendered board; edits go through /api/day/update."""
    session = get_session()
    try:
        snapshot = build_board_snapshot(session, evaluation_instant(), board_zone())
    finally:
        session.close()
    return render_template('board.html', board=snapshot, key=request.args.get('key', ''))


@bp.route('/api/health')
def health_check():
    return jsonify({'status': 'healthy'}), 200


@bp.route('/api/board')
def get_board():
    """Five-day snapshot for both teams, weather, and unlock state."""
    session = get_session()
    try:
        return jsonify(build_board_snapshot(session, evaluation_instant(), board_zone()))
    except Exception as e:
        logger.error("Error fetching board data: %s", e, exc_info=True)
        return jsonify({'error': 'Internal server error', 'code': 'SERVER_ERROR', 'details': str(e)}), 500
    finally:
        session.close()
