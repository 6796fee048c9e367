"""
Ops Module
==========

Public health endpoint for uptime monitors and load balancers.

Usage:
    from comingsoon.modules.ops import ops_health_bp

    app.register_blueprint(ops_health_bp)  # Registers at /api/health
"""

from flask import Blueprint

ops_health_bp = Blueprint(
    'ops_health',
    __name__,
    url_prefix='/api/health'
)

from . import routes
