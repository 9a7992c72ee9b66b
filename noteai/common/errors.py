import logging

from flask import jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger("noteai.error")


class ApiError(Exception):
    def __init__(self, message, status_code=400, code="bad_request", details=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}


class NoteValidationError(ApiError):
    """Entrée invalide, corrigeable par l'appelant. Nomme le champ fautif."""

    def __init__(self, field: str, message: str):
        super().__init__(message, 400, "validation_error", details={"field": field})
        self.field = field


class NotFoundError(ApiError):
    """Note absente OU appartenant à un autre propriétaire (indiscernable)."""

    def __init__(self, message="Note not found."):
        super().__init__(message, 404, "not_found")


class EmptyContentError(ApiError):
    def __init__(self, message="Note has no content to summarize."):
        super().__init__(message, 400, "empty_content")


class ServiceError(ApiError):
    """Échec (ou timeout) du service de résumé."""

    def __init__(self, message="Summarization service failed.", code="service_error"):
        super().__init__(message, 502, code)


class SummaryGenerationError(ServiceError):
    def __init__(self, message="Failed to generate summary. Please try again."):
        super().__init__(message, code="summary_failed")


def _json_error(message, status, code, details=None):
    return jsonify({
        "error": {"code": code, "message": message, "details": details or {}}
    }), status


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return _json_error(e.message, e.status_code, e.code, e.details)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return _json_error("Invalid request body.", 400, "validation_error", e.messages)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        # Ex: 404, 405, 413…
        return _json_error(e.description or "HTTP error", e.code or 500, "http_error")

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # traceback en console, masqué côté client
        logger.exception("unexpected_error")
        return _json_error("Internal server error.", 500, "internal_error")
