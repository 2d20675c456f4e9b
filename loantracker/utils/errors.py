"""API error types and JSON error handlers"""
from flask import jsonify
from werkzeug.exceptions import HTTPException

AUTHENTICATION_MESSAGE = 'Invalid or expired credentials'


class ApiError(Exception):
    """Error answered with ``{"message": ...}`` and an HTTP status"""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401

    def __init__(self, message=AUTHENTICATION_MESSAGE):
        super().__init__(message)


class AuthorizationError(ApiError):
    status_code = 403


def error_response(message, status_code):
    return jsonify({'message': message}), status_code


def register_error_handlers(app):
    """Render every error as JSON"""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return error_response(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        app.logger.exception('Unhandled error: %s', error)
        return error_response('Internal server error', 500)
