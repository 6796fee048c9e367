"""
Centralized logging service for the coming soon site.
Provides console logging setup plus structured event storage in the
app_logs table, so subscriber activity survives container rebuilds.
"""

import json
import logging
import traceback
from datetime import datetime, timedelta

from flask import current_app, has_app_context, has_request_context, request
from sqlalchemy import delete, insert
from sqlalchemy.exc import SQLAlchemyError

from .database import db

LOG_FORMAT = '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'

_console = logging.getLogger('comingsoon.events')


def configure_logging(app):
    """Set up console logging once per process"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger('comingsoon').setLevel(level)
    app.logger.setLevel(level)


class AppLog(db.Model):
    __tablename__ = 'app_logs'

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)
    level = db.Column(db.String(16), nullable=False, index=True)
    source = db.Column(db.String(64), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.Text)
    request_path = db.Column(db.Text)

    def __repr__(self):
        return f'<AppLog {self.level} {self.source}>'


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _enabled():
        if not has_app_context():
            return False
        return bool(current_app.config.get('DB_LOGGING', True))

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None
        user_agent = request.headers.get('User-Agent', '')[:500]
        return request.remote_addr, user_agent, request.path

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message to the console and the app_logs table

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (subscribers, ops, app)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)

        The row is written on its own connection so it never commits or
        rolls back the caller's session.
        """
        level = level.upper()
        _console.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")

        if not LoggingService._enabled():
            return

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        ip_address, user_agent, request_path = LoggingService._get_request_context()

        try:
            with db.engine.begin() as conn:
                conn.execute(insert(AppLog.__table__).values(
                    timestamp=datetime.now(),
                    level=level,
                    source=source,
                    message=message,
                    details=details,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    request_path=request_path,
                ))
        except SQLAlchemyError as e:
            _console.warning(f"Logging service error: {e}")

    @staticmethod
    def info(source, message, details=None):
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries. Returns the number of rows deleted."""
        cutoff = datetime.now() - timedelta(days=days_to_keep)
        try:
            with db.engine.begin() as conn:
                result = conn.execute(delete(AppLog.__table__).where(AppLog.timestamp < cutoff))
            deleted_count = result.rowcount
        except SQLAlchemyError as e:
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0

        LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
        return deleted_count


# Convenience instance for easy importing
event_log = LoggingService()
