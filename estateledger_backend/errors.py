# estateledger_backend/errors.py
from __future__ import annotations

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base for errors that map straight to an HTTP status and a message."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(ApiError):
    status_code = 400


class AuthenticationMissing(ApiError):
    status_code = 401


class AuthorizationDenied(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404


def envelope(success: bool, message: str | None = None, data=None, **extra):
    body = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


def error_response(message: str, status_code: int):
    return jsonify(envelope(False, message)), status_code


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def api_error(e):
        return error_response(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return error_response(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def server_error(e):
        current_app.logger.exception("Unhandled exception: %s", e)
        return error_response("An unexpected error occurred.", 500)


def register_jwt_handlers(jwt):
    @jwt.unauthorized_loader
    def _missing_token(reason):
        return error_response("Unauthorized: No token provided", 401)

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return error_response("Unauthorized: Invalid token", 401)

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return error_response("Unauthorized: Token has expired", 401)
