import os
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

IS_PRODUCTION = (
    os.getenv('ENVIRONMENT') == 'production' or
    os.getenv('FLASK_ENV') == 'production' or
    os.getenv('NODE_ENV') == 'production'
)


def _database_url(db_dir):
    """Resolve DATABASE_URL, falling back to a SQLite file under DB_DIR"""
    url = os.getenv('DATABASE_URL', '').strip()
    if not url:
        return 'sqlite:///' + os.path.join(db_dir, 'subscribers.db')
    # Hosted Postgres hands out postgres:// but SQLAlchemy needs postgresql://
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def _engine_options(url, production):
    """Production Postgres connections use TLS without certificate verification"""
    if production and url.startswith('postgresql'):
        return {'connect_args': {'sslmode': 'require'}, 'pool_pre_ping': True}
    return {}


class Config:
    """
    Base configuration for the coming soon site.
    Everything is read from the environment (or a .env file).
    """
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')
    ENVIRONMENT = 'production' if IS_PRODUCTION else os.getenv('ENVIRONMENT', 'development')
    IS_PRODUCTION = IS_PRODUCTION

    PORT = int(os.getenv('PORT', '5000'))

    # Database
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    SQLALCHEMY_DATABASE_URI = _database_url(DB_DIR)
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI, IS_PRODUCTION)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CORS: no cross-origin access in production
    CORS_ORIGINS = [] if IS_PRODUCTION else [
        f'http://localhost:{PORT}',
        f'http://127.0.0.1:{PORT}',
    ]

    # Rate limiting (fixed window, per client IP)
    RATELIMIT_ENABLED = os.getenv('RATELIMIT_ENABLED', '1') != '0'
    RATELIMIT_WINDOW_SECONDS = int(os.getenv('RATELIMIT_WINDOW_SECONDS', str(15 * 60)))
    RATELIMIT_GENERAL = int(os.getenv('RATELIMIT_GENERAL', '100'))
    RATELIMIT_SIGNUP = int(os.getenv('RATELIMIT_SIGNUP', '5'))

    # Number of reverse proxies in front of the app (X-Forwarded-For hops)
    TRUST_PROXY_HOPS = int(os.getenv('TRUST_PROXY_HOPS', '1'))

    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    BRAND_NAME = os.getenv('BRAND_NAME', 'Auravia')
    STATIC_FOLDER = os.getenv('STATIC_FOLDER', os.path.join(PACKAGE_DIR, 'static'))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    # Persist subscriber events to the app_logs table
    DB_LOGGING = os.getenv('DB_LOGGING', '1') != '0'
