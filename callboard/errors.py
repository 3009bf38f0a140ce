"""
API error taxonomy.

Every error the board returns to a client is shaped {error, code[, details]}.
Raise an ApiError subclass anywhere below a route and the handler registered
in create_app() turns it into the JSON response.
"""


class ApiError(Exception):
    """Base class for errors that map directly onto an HTTP response."""
    status = 500
    code = 'SERVER_ERROR'

    def __init__(self, message, code=None, status=None, details=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status
        self.details = details

    def to_dict(self):
        body = {'error': self.message, 'code': self.code}
        if self.details:
            body['details'] = self.details
        return body


class UnauthorizedError(ApiError):
    status = 401
    code = 'UNAUTHORIZED'


class ValidationError(ApiError):
    status = 400
    code = 'VALIDATION_ERROR'


class DayLockedError(ApiError):
    status = 403
    code = 'DAY_LOCKED'
