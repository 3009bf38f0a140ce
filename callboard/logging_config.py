"""
Structured logging configuration.

Called once from create_app(). LOG_FORMAT picks text or single-line JSON,
LOG_LEVEL defaults to INFO. Records emitted while a request is being handled
carry the HTTP method and path so board edits can be traced in the logs.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import has_request_context, request


class RequestContextFilter(logging.Filter):
    """Attach method/path of the current Flask request (or '-') to each record."""

    def filter(self, record):
        if has_request_context():
            record.method = request.method
            record.path = request.path
        else:
            record.method = '-'
            record.path = '-'
        return True


class JSONFormatter(logging.Formatter):
    """Single-line JSON log formatter for production log aggregators."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        path = getattr(record, 'path', '-')
        if path != '-':
            entry['method'] = getattr(record, 'method', '-')
            entry['path'] = path
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


# Third-party loggers that are noisy at INFO
_NOISY_LOGGERS = [
    'urllib3',
    'requests',
    'werkzeug',
    'sqlalchemy.engine',
]


def _resolve_level(name):
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(app=None):
    """
    Install a single stderr handler on the root logger.

    Environment variables:
        LOG_LEVEL  — Python log level name (default: INFO)
        LOG_FORMAT — "text" (default) or "json"
    """
    level = _resolve_level(os.getenv('LOG_LEVEL', 'INFO'))
    log_format = os.getenv('LOG_FORMAT', 'text').lower()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())

    if log_format == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s %(name)s %(method)s %(path)s — %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))

    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if app is not None:
        # Let Flask's own logger propagate to the root handler instead of its default one.
        app.logger.handlers.clear()
        app.logger.propagate = True
