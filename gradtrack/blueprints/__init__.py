"""
GradTrack
Blueprint registry helpers.

Every resource blueprint calls ``init_resource_blueprint(bp)`` once, which
  - requires an authenticated user on every request (401 otherwise)
  - maps the core exception types to standard JSON error bodies
"""

import logging

from flask import request
from werkzeug.exceptions import HTTPException

from gradtrack.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
    ValidationError,
)
from gradtrack.middleware.jwt_auth import require_user
from gradtrack.models import db
from gradtrack.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def register_error_handlers(bp):
    """Attach the standard exception → HTTP mapping to ``bp``."""

    @bp.errorhandler(NotFoundError)
    def _handle_not_found(error: NotFoundError):
        logger.debug("Not found: %s", error)
        return api_error(E.NOT_FOUND, error.public_message)

    @bp.errorhandler(ValidationError)
    def _handle_validation(error: ValidationError):
        return api_error(E.VALIDATION_INVALID, str(error), details=error.details)

    @bp.errorhandler(InvalidReferenceError)
    def _handle_invalid_reference(error: InvalidReferenceError):
        logger.info("Invalid reference %s=%s", error.field, error.value)
        return api_error(
            E.INVALID_REFERENCE, str(error),
            details=[{"field": error.field, "message": str(error)}],
        )

    @bp.errorhandler(ConflictError)
    def _handle_conflict(error: ConflictError):
        return api_error(E.CONFLICT_DUPLICATE, f"{error.resource} with this {error.field} already exists")

    @bp.errorhandler(AuthenticationError)
    def _handle_auth(error: AuthenticationError):
        return api_error(E.UNAUTHENTICATED, str(error))

    @bp.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return api_error(f"ERR_HTTP_{error.code}", error.description, status=error.code)
        db.session.rollback()
        logger.exception("Unexpected error in %s endpoint=%s", bp.name, request.endpoint)
        return api_error(E.INTERNAL, "Internal server error")


def init_resource_blueprint(bp):
    bp.before_request(require_user)
    register_error_handlers(bp)
    return bp


def query_int(name):
    """Integer query parameter, or None when absent or not a number."""
    return request.args.get(name, type=int)
