"""
Flask application factory.

Creates and configures the Flask app, installs the key gate, registers all
blueprints.
"""
import logging
import os
from datetime import date

from flask import Flask, request, jsonify, render_template_string

from callboard.errors import ApiError, UnauthorizedError

logger = logging.getLogger('callboard')


def _weekday(iso_str):
    """Jinja2 filter: '2026-10-19' → 'Mon'."""
    try:
        return date.fromisoformat(iso_str).strftime('%a')
    except (TypeError, ValueError):
        return ''


def _short_date(iso_str):
    """Jinja2 filter: '2026-10-19' → 'Oct 19'."""
    try:
        day = date.fromisoformat(iso_str)
    except (TypeError, ValueError):
        return ''
    return f"{day.strftime('%b')} {day.day}"


ACCESS_PAGE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Access Required</title>
    <style>
        body { font-family: system-ui, sans-serif; display: flex; align-items: center;
               justify-content: center; min-height: 100vh; margin: 0; background: #f3f4f6; }
        .container { text-align: center; padding: 2rem; background: white; border-radius: 0.5rem;
                     box-shadow: 0 1px 3px rgba(0,0,0,0.1); max-width: 400px; }
        h1 { color: #1f2937; margin-bottom: 1rem; }
        p { color: #6b7280; margin-bottom: 1.5rem; }
        input { width: 100%; padding: 0.75rem; border: 1px solid #d1d5db; border-radius: 0.375rem;
                margin-bottom: 1rem; box-sizing: border-box; }
        button { width: 100%; padding: 0.75rem; background: #3b82f6; color: white; border: none;
                 border-radius: 0.375rem; cursor: pointer; }
    </style>
</head>
<body>
    <div class="container">
        <h1>Access Required</h1>
        <p>Please enter the access key to view the Call Board</p>
        <form method="GET" action="/">
            <input type="password" name="key" placeholder="Enter access key" required autofocus>
            <button type="submit">Access Board</button>
        </form>
    </div>
</body>
</html>
'''

OPEN_PATHS = {'/api/health', '/favicon.ico'}

SECURITY_HEADERS = {
    'X-Frame-Options': 'DENY',
    'X-Content-Type-Options': 'nosniff',
    'Referrer-Policy': 'origin-when-cross-origin',
}


def create_app(verifier=None):
    """Create and configure the Flask application.

    `verifier` is the credential check used by the gate; it defaults to a
    SharedSecretVerifier built from SECRET_URL_KEY / CRON_SECRET.
    """
    from callboard.config import SECRET_KEY, SECRET_URL_KEY, CRON_SECRET
    from callboard.logging_config import configure_logging
    from callboard.services.auth import SharedSecretVerifier, bearer_token

    app = Flask(
        __name__,
        template_folder=os.path.join(os.path.dirname(os.path.dirname(__file__)), 'templates'),
        static_folder=os.path.join(os.path.dirname(os.path.dirname(__file__)), 'static'),
    )

    configure_logging(app)

    app.secret_key = SECRET_KEY
    app.jinja_env.filters['weekday'] = _weekday
    app.jinja_env.filters['short_date'] = _short_date

    if verifier is None:
        verifier = SharedSecretVerifier(SECRET_URL_KEY, CRON_SECRET)
    app.extensions['credential_verifier'] = verifier

    # ── Key gate ────────────────────────────────────────────────────────
    @app.before_request
    def require_key():
        path = request.path
        if path in OPEN_PATHS or path.startswith('/static/'):
            return
        if verifier.verify_key(request.args.get('key')):
            return
        if path.startswith('/api/') and verifier.verify_bearer(bearer_token(request.headers.get('Authorization'))):
            return
        if path == '/':
            return render_template_string(ACCESS_PAGE), 401
        logger.warning("Rejected unauthenticated request to %s", path)
        return jsonify(UnauthorizedError('Unauthorized').to_dict()), 401

    @app.after_request
    def add_security_headers(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    # ── Error handlers ──────────────────────────────────────────────────
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status

    @app.errorhandler(500)
    def handle_server_error(error):
        logger.error("Unhandled error on %s", request.path, exc_info=True)
        return jsonify({'error': 'Internal server error', 'code': 'SERVER_ERROR'}), 500

    # Register blueprints
    from callboard.routes.board import bp as board_bp
    from callboard.routes.day import bp as day_bp
    from callboard.routes.weather import bp as weather_bp
    from callboard.routes.unlock import bp as unlock_bp

    app.register_blueprint(board_bp)
    app.register_blueprint(day_bp)
    app.register_blueprint(weather_bp)
    app.register_blueprint(unlock_bp)

    # Import models so Base.metadata knows about them.
    # Schema is managed by Alembic; scripts/seed.py calls init_db() for local SQLite.
    import callboard.models  # noqa: F401

    return app
