"""
Shared fixtures: a fresh app and SQLite database per test.

Run with: pytest tests/ -v
Install test dependencies with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile
import pytest

from comingsoon import create_app
from comingsoon.core.database import db
from comingsoon.modules.subscribers.models import Subscriber


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for the test database, cleaned up after."""
    d = tempfile.mkdtemp(prefix="comingsoon-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


def make_app(tmp_db_dir, **overrides):
    config = {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DB_DIR": tmp_db_dir,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///" + os.path.join(tmp_db_dir, "subscribers.db"),
        "SQLALCHEMY_ENGINE_OPTIONS": {},
        "IS_PRODUCTION": False,
        "CORS_ORIGINS": ["http://localhost:5000", "http://127.0.0.1:5000"],
        "BRAND_NAME": "Auravia",
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture
def app(tmp_db_dir):
    """Fully initialised app backed by a throwaway SQLite file."""
    app = make_app(tmp_db_dir)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def add_subscriber(app):
    """Insert a subscriber row directly, bypassing the API."""
    def _add(email, **fields):
        with app.app_context():
            subscriber = Subscriber(email=email, **fields)
            db.session.add(subscriber)
            db.session.commit()
            return {
                "id": subscriber.id,
                "email": subscriber.email,
                "unsubscribe_token": subscriber.unsubscribe_token,
            }
    return _add


@pytest.fixture
def get_subscribers(app):
    """All rows for an email (or every row), read in a fresh app context."""
    def _get(email=None):
        with app.app_context():
            query = db.session.query(Subscriber)
            if email is not None:
                query = query.filter(Subscriber.email == email)
            rows = query.order_by(Subscriber.id).all()
            return [
                {
                    "id": s.id,
                    "email": s.email,
                    "is_active": s.is_active,
                    "confirmed": s.confirmed,
                    "subscribed_at": s.subscribed_at,
                    "ip_address": s.ip_address,
                    "user_agent": s.user_agent,
                    "confirmation_token": s.confirmation_token,
                    "unsubscribe_token": s.unsubscribe_token,
                }
                for s in rows
            ]
    return _get



@pytest.fixture
def app_factory(tmp_db_dir):
    """Build extra apps with config overrides on the same temporary directory."""
    created = []

    def _factory(**overrides):
        app = make_app(tmp_db_dir, **overrides)
        created.append(app)
        return app

    yield _factory
    for app in created:
        with app.app_context():
            db.session.remove()
            db.engine.dispose()
