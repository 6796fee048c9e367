from flask import current_app, send_from_directory

from . import site_bp


def _send_static(filename):
    response = send_from_directory(current_app.config['STATIC_FOLDER'], filename)
    if filename.endswith('.html'):
        response.headers['Cache-Control'] = 'no-cache'
    return response


@site_bp.route('/')
def index():
    """Landing page"""
    return _send_static('index.html')


@site_bp.route('/<path:filename>')
def static_files(filename):
    """Page assets (script, stylesheet, images)"""
    return _send_static(filename)
