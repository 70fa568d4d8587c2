"""
Error handling for FinQuest.

Every rejected operation raises a ``FinQuestError`` subclass carrying an
HTTP status and a stable machine-readable ``code``. API responses share
one envelope:

    {"success": false, "message": "...", "code": "...", "details": {...}}
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException


class FinQuestError(Exception):
    """Base class of all expected, client-visible failures."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            'success': False,
            'message': self.message,
            'code': self.code,
            'details': self.details,
        }


class NotFoundError(FinQuestError):

    def __init__(self, message: str = 'Resource not found', resource: str = None, code: str = 'NOT_FOUND'):
        super().__init__(message, code=code, status_code=404, details={'resource': resource} if resource else None)


class ConflictError(FinQuestError):
    """The request is valid but clashes with the resource's current state."""

    def __init__(self, message: str = 'Conflict', code: str = 'CONFLICT', details: Dict = None):
        super().__init__(message, code=code, status_code=409, details=details)


class ValidationError(FinQuestError):

    def __init__(self, message: str = 'Validation failed', errors: Dict = None, code: str = 'VALIDATION_ERROR'):
        super().__init__(message, code=code, status_code=400, details={'errors': errors} if errors else None)


# Codes for plain HTTP errors raised by Flask/werkzeug on API paths
HTTP_ERROR_CODES = {
    400: 'BAD_REQUEST',
    401: 'UNAUTHORIZED',
    403: 'FORBIDDEN',
    404: 'NOT_FOUND',
    405: 'METHOD_NOT_ALLOWED',
}


def error_response(message: str, code: str = 'ERROR', status_code: int = 400, details: Dict = None) -> tuple:
    payload = {'success': False, 'message': message, 'code': code}
    if details:
        payload['details'] = details
    return jsonify(payload), status_code


def success_response(data: Any = None, message: str = None) -> dict:
    payload = {'success': True}
    if data is not None:
        payload['data'] = data
    if message:
        payload['message'] = message
    return payload


def _is_api_request() -> bool:
    return request.path.startswith('/api/')


def register_error_handlers(app):
    """Render FinQuest errors, and HTTP errors on API paths, as JSON."""

    @app.errorhandler(FinQuestError)
    def handle_finquest_error(error):
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.warning
        log(f"[{request.method} {request.path}] {error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if not _is_api_request():
            return error
        code = HTTP_ERROR_CODES.get(error.code, 'HTTP_ERROR')
        message = 'Authentication required' if error.code == 401 else error.description
        return error_response(message, code, error.code)

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.error(f"Unhandled error on {request.path}: {error}", exc_info=True)
        if _is_api_request():
            return error_response('Internal server error', 'SERVER_ERROR', 500)
        return error
