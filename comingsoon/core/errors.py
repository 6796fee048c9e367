"""
App-wide JSON error handlers.

Every API error has the shape {"success": false, "message": "..."}; the
unsubscribe page renders its own HTML and never reaches these handlers.
"""

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from .database import db
from .logging_service import event_log

logger = logging.getLogger(__name__)

MESSAGES = {
    404: 'Endpoint not found',
    405: 'Method not allowed',
    413: 'Request body too large',
}


def error_response(message, status_code):
    response = jsonify({'success': False, 'message': message})
    response.status_code = status_code
    return response


def register_error_handlers(app):

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        # Redirects (e.g. trailing slash) pass through untouched
        if e.code is None or e.code < 400:
            return e.get_response()
        if e.code >= 500:
            logger.error(f"HTTP {e.code}: {e.description}")
            return error_response('Internal server error', e.code)
        return error_response(MESSAGES.get(e.code, e.name), e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled error")
        db.session.rollback()
        event_log.log_error_with_traceback('app', e)
        return error_response('Internal server error', 500)
