"""
Subscribers Module
==================

Provides:
- POST /api/subscribe -- email capture (insert or reactivate)
- GET /api/unsubscribe/<token> -- one-click unsubscribe page
- GET /api/stats -- subscriber counts
- GET /api/export -- active subscriber list
"""

from flask import Blueprint

subscribers_bp = Blueprint(
    'subscribers',
    __name__,
    url_prefix='/api',
    template_folder='templates',
)

from . import routes
