"""
Ops Routes
==========

Database round-trip health check. No retries: a failing store is reported
as-is so monitors see it immediately.
"""

import logging
from datetime import datetime, timezone

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from comingsoon.core.database import db, ping
from comingsoon.core.logging_service import event_log

from . import ops_health_bp

logger = logging.getLogger(__name__)


def _timestamp():
    """ISO-8601 UTC timestamp with millisecond precision"""
    now = datetime.now(timezone.utc)
    return now.strftime('%Y-%m-%dT%H:%M:%S.') + f'{now.microsecond // 1000:03d}Z'


@ops_health_bp.route('/')
@ops_health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    try:
        ping()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Health check error: {e}")
        event_log.error('ops', 'Health check failed', {'error': str(e)})
        return jsonify({
            'success': False,
            'message': 'Database connection failed',
        }), 500

    return jsonify({
        'success': True,
        'message': 'Server and database are healthy',
        'timestamp': _timestamp(),
    }), 200
