"""Tests for callboard.routes.board: snapshot API and server-rendered page."""
from datetime import timedelta
from unittest.mock import patch

from tests.conftest import NOW, TEST_KEY, TODAY


class TestGetBoard:
    """GET /api/board returns the five-day snapshot."""

    def test_returns_snapshot(self, client):
        resp = client.get(f'/api/board?key={TEST_KEY}')
        assert resp.status_code == 200
        data = resp.json
        assert data['days'] == ['2026-10-18', '2026-10-19', '2026-10-20', '2026-10-21', '2026-10-22']
        assert set(data) == {'days', 'targets', 'hvac', 'plumbing', 'weather', 'unlockSession', 'serverTime'}
        assert data['unlockSession'] is None

    def test_includes_stored_records(self, client, make_record):
        make_record('PLUMBING', TODAY, tech_count=4, actual_jobs=10, aged_opps=2)
        cell = client.get(f'/api/board?key={TEST_KEY}').json['plumbing']['2026-10-19']
        assert cell['minGoal'] == 12
        assert cell['variance'] == -2
        assert cell['agedPercent'] == 20

    def test_unlock_session_remaining_seconds(self, client, make_unlock):
        make_unlock(NOW + timedelta(seconds=30))
        data = client.get(f'/api/board?key={TEST_KEY}').json
        assert data['unlockSession']['remainingSeconds'] == 30
        assert data['hvac']['2026-10-18']['editable'] is True

    def test_server_error(self, client):
        with patch('callboard.routes.board.build_board_snapshot', side_effect=RuntimeError('db gone')):
            resp = client.get(f'/api/board?key={TEST_KEY}')
        assert resp.status_code == 500
        assert resp.json['code'] == 'SERVER_ERROR'
        assert resp.json['error'] == 'Internal server error'
        assert 'db gone' in resp.json['details']


class TestIndex:
    """GET / renders the board."""

    def test_renders_targets(self, client):
        resp = client.get(f'/?key={TEST_KEY}')
        assert resp.status_code == 200
        assert b'Target: 66%' in resp.data
        assert b'Target: 15%' in resp.data

    def test_locked_yesterday_inputs_disabled(self, client):
        resp = client.get(f'/?key={TEST_KEY}')
        assert b'Yesterday locked' in resp.data
        assert b'disabled' in resp.data
