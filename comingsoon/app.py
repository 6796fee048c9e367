"""
Application factory.
"""

import logging

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.config import Config
from .core.database import db, init_database
from .core.errors import register_error_handlers
from .core.logging_service import configure_logging
from .core.rate_limit import limiter
from .core.security import init_cors, init_security_headers

logger = logging.getLogger(__name__)


def create_app(config_overrides=None):
    """Build the Flask app: config, extensions, blueprints, then the schema"""
    app = Flask(__name__, static_folder=None)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app)

    hops = app.config.get('TRUST_PROXY_HOPS', 1)
    if hops:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops)

    db.init_app(app)
    init_cors(app)
    init_security_headers(app)
    limiter.init_app(app)
    register_error_handlers(app)

    from .modules.ops import ops_health_bp
    from .modules.site import site_bp
    from .modules.subscribers import subscribers_bp

    app.register_blueprint(subscribers_bp)
    app.register_blueprint(ops_health_bp)
    # Registered last: its catch-all file route must not shadow the API
    app.register_blueprint(site_bp)

    init_database(app)
    return app
