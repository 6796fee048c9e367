"""
Database
========

Single Flask-SQLAlchemy handle shared by every module. Modules declare their
models against `db` and the app factory calls `init_database` once the
blueprints are imported so every table is known.
"""

import logging
import os

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def _ensure_sqlite_dir(uri):
    """Create the parent directory of a file-backed SQLite database"""
    if not uri.startswith('sqlite:///'):
        return
    path = uri[len('sqlite:///'):]
    if path and path != ':memory:':
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)


def init_database(app):
    """
    Create all tables and indexes if they do not exist yet.

    A failure is logged rather than raised so the server still starts and
    /api/health can report the broken database.
    """
    _ensure_sqlite_dir(app.config.get('SQLALCHEMY_DATABASE_URI', ''))
    with app.app_context():
        try:
            db.create_all()
            logger.info("Database initialized successfully")
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database initialization error: {e}")
            return False


def ping():
    """Trivial round trip against the store. Raises on failure."""
    db.session.execute(text('SELECT 1'))


def close_database(app):
    """Release pooled connections (used on shutdown)"""
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    logger.info("Database connections closed")
