"""
Site Module
===========

Serves the landing page and its assets from STATIC_FOLDER at the site root.
"""

from flask import Blueprint

site_bp = Blueprint('site', __name__)

from . import routes
