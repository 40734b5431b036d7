"""
Error Handling
API error types and the handlers that turn them into JSON responses.
"""

import logging
from flask import jsonify, request
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for errors that carry an HTTP status and a caller-safe message."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code


class BadRequest(ApiError):
    status_code = 400
    default_message = 'Bad request'


class Unauthorized(ApiError):
    status_code = 401
    default_message = 'Unauthorized'


class Forbidden(ApiError):
    status_code = 403
    default_message = 'Forbidden'


class NotFound(ApiError):
    status_code = 404
    default_message = 'Not found'


class Conflict(ApiError):
    status_code = 409
    default_message = 'Conflict'


class ErrorHandler:
    """Centralized error handling system."""

    def __init__(self, app=None):
        self.app = app
        self.logger = logging.getLogger(__name__)

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self._register_error_handlers()

    def _register_error_handlers(self):

        @self.app.errorhandler(ApiError)
        def handle_api_error(error):
            return self.handle_error(error.status_code, error.message)

        @self.app.errorhandler(HTTPException)
        def handle_http_exception(error):
            return self.handle_error(error.code, error.name)

        @self.app.errorhandler(Exception)
        def handle_exception(error):
            self.logger.exception(f'Unhandled error on {request.method} {request.path}')
            return self.handle_error(500, 'Internal server error')

    def handle_error(self, status_code, message):
        if status_code >= 500:
            self.logger.error(f'{status_code} {request.method} {request.path}: {message}')
        elif status_code != 404:
            self.logger.info(f'{status_code} {request.method} {request.path}: {message}')
        return jsonify({'message': message}), status_code
