"""
Response hardening: CORS policy and security headers.
"""

from flask_cors import CORS

CONTENT_SECURITY_POLICY = '; '.join([
    "default-src 'self'",
    "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com https://cdnjs.cloudflare.com",
    "font-src 'self' https://fonts.gstatic.com https://cdnjs.cloudflare.com",
    "script-src 'self'",
    "img-src 'self' data:",
    "connect-src 'self'",
])


def init_cors(app):
    """Only the configured origins may call the API from a browser.
    An empty list (production) disables cross-origin access entirely."""
    CORS(
        app,
        resources={r'/*': {'origins': app.config.get('CORS_ORIGINS', [])}},
        supports_credentials=True,
    )


def init_security_headers(app):
    production = app.config.get('IS_PRODUCTION', False)

    @app.after_request
    def set_security_headers(response):
        headers = response.headers
        headers.setdefault('Content-Security-Policy', CONTENT_SECURITY_POLICY)
        headers.setdefault('X-Content-Type-Options', 'nosniff')
        headers.setdefault('X-Frame-Options', 'SAMEORIGIN')
        headers.setdefault('Referrer-Policy', 'no-referrer')
        headers.setdefault('Cross-Origin-Opener-Policy', 'same-origin')
        if production:
            headers.setdefault('Strict-Transport-Security', 'max-age=15552000; includeSubDomains')
        return response
