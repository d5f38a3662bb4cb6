"""
Run the backend with Flask's built-in server.

    clueapi-server            # or: python -m clueapi.server

For production, point a WSGI server at ``clueapi.server:create_wsgi_app()``.
"""

import logging
import sys

from . import create_app
from .core.config import ConfigError

logger = logging.getLogger(__name__)


def create_wsgi_app():
    """Build the app, exiting the process if configuration is incomplete"""
    try:
        return create_app()
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.critical(f"Error: {e}")
        sys.exit(1)


def main():
    app = create_wsgi_app()
    port = app.config['PORT']
    logger.info(f"Backend server running on http://localhost:{port}")
    app.run(host='0.0.0.0', port=port)


if __name__ == '__main__':
    main()
