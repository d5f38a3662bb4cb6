"""
Centralized logging setup for the Clue Analytics backend.
Adds request context (client IP and path) to every log record.
"""

import logging
from flask import request, has_request_context

LOG_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s] [%(ip)s %(path)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class RequestContextFilter(logging.Filter):
    """Attach ``ip`` and ``path`` attributes to log records"""

    def filter(self, record):
        ip_address, request_path = self._get_request_context()
        record.ip = ip_address
        record.path = request_path
        return True

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return '-', '-'

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        return ip_address or '-', request.path


def configure_logging(app):
    """
    Install a single stream handler on the ``clueapi`` logger hierarchy
    (the Flask app logger too, when the app is built by ``create_app``).

    Calling this more than once (e.g. one app per test) does not stack
    handlers.
    """
    level_name = str(app.config.get('LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RequestContextFilter())
    handler.set_name('clueapi')

    package_logger = logging.getLogger('clueapi')
    for existing in list(package_logger.handlers):
        if existing.get_name() == 'clueapi':
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)

    return handler
