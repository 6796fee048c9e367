"""
Coming Soon
===========

A "coming soon" landing page with an email capture API:

- POST /api/subscribe            capture or reactivate an email address
- GET  /api/unsubscribe/<token>  one-click unsubscribe page
- GET  /api/stats                subscriber counts
- GET  /api/export               active subscriber list
- GET  /api/health               database round trip

Usage:
    from comingsoon import create_app

    app = create_app()
    app.run(port=5000)
"""

__version__ = '0.1.0'

from .app import create_app

__all__ = ['create_app']
