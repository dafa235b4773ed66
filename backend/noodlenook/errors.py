import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from noodlenook.domain.exceptions import DomainError
from noodlenook.extensions import db, jwt

logger = logging.getLogger(__name__)


def _error(kind, message, status):
    response = jsonify({
        "error": kind,
        "message": message
    })
    response.status_code = status
    return response


def register_error_handlers(app):
    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        logger.info("%s: %s", error.kind, error.message)
        return _error(error.kind, error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return _error(error.name.replace(" ", ""), error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        db.session.rollback()
        return _error("InternalError", "Server error", 500)

    # Bearer token failures on write paths are all 401
    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return _error("AuthenticationError", "Missing authorization token", 401)

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return _error("AuthenticationError", "Invalid token", 401)

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return _error("AuthenticationError", "Token has expired", 401)
