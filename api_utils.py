from flask import jsonify

from validators import ValidationError


def error_response(message, status):
    return jsonify({"success": False, "error": message}), status


def register_error_handlers(bp):
    """JSON error bodies for a JSON API blueprint."""

    @bp.errorhandler(ValidationError)
    def handle_validation_error(e):
        return error_response(e.message, 400)

    # Flask logs the original exception before calling this
    @bp.errorhandler(500)
    def handle_internal_error(e):
        return error_response("Internal server error", 500)
