"""
Development/production entry point.

Run with:
    comingsoon
or:
    python -m comingsoon
"""

import logging
import signal
import sys

from .app import create_app
from .core.database import close_database

logger = logging.getLogger(__name__)


def _install_shutdown_handler(app):
    def shutdown(signum, frame):
        logger.info("Gracefully shutting down...")
        close_database(app)
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)


def main():
    app = create_app()
    _install_shutdown_handler(app)

    port = app.config['PORT']
    logger.info(f"{app.config['BRAND_NAME']} Coming Soon server running on port {port}")
    logger.info(f"Environment: {app.config['ENVIRONMENT']}")

    app.run(host='0.0.0.0', port=port, debug=not app.config['IS_PRODUCTION'],
            use_reloader=False)


if __name__ == '__main__':
    main()
