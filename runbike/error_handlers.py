"""JSON error responses for application and HTTP errors."""

from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError

from .errors import (
    AppError,
    AuthError,
    DataIntegrityError,
    DuplicateResourceError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ResourceInUseError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(message, status_code):
    return jsonify({"status": "error", "error": message}), status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(AuthError)
def handle_auth_error(error):
    current_app.logger.info(f"Auth Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(ForbiddenError)
def handle_forbidden_error(error):
    current_app.logger.warning(f"Forbidden: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(DuplicateResourceError)
def handle_duplicate_resource_error(error):
    """Handles duplicate resource errors."""
    current_app.logger.warning(f"Duplicate Resource Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(ResourceInUseError)
def handle_resource_in_use(error):
    current_app.logger.warning(f"Resource In Use: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(InvalidTransitionError)
def handle_invalid_transition(error):
    """Handles race actions that do not fit the roster state."""
    current_app.logger.warning(f"Invalid Transition: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(DataIntegrityError)
def handle_data_integrity_error(error):
    """Handles stored records that cannot be aggregated."""
    current_app.logger.error(f"Data Integrity Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error_response("Not found.", 404)


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    return _error_response("Method not allowed.", 405)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response("An unexpected error occurred.", 500)


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """Handles CSRF errors, usually an expired session or a stale form."""
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return _error_response(
        "Your session may have expired. Please try your action again.", 400
    )
