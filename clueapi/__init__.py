"""
ClueAPI - Clue Analytics site backend
=====================================

A small Flask backend for the Clue Analytics marketing site:
- Cached RSS/Atom feed proxy
- Newsletter subscriptions with a confirmation email
- Contact form with an admin notification email
- Basic-auth protected admin listings

Usage:
    from clueapi import create_app

    app = create_app()
    app.run(port=app.config['PORT'])

Or, with an existing Flask app:
    from clueapi import ClueAPI

    ClueAPI(app)
"""

import atexit
import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .core.config import Config, validate_config
from .core.database import create_store
from .core.extensions import cache, limiter
from .core.logging_service import configure_logging
from .core.utils import get_client_ip

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ['Origin', 'X-Requested-With', 'Content-Type', 'Accept', 'Authorization']
CORS_METHODS = ['GET', 'POST', 'OPTIONS']


class ClueAPI:
    """
    Flask extension that wires the backend onto an app.

    Owns the store and the email notifier; both are created in ``init_app``
    and released by ``close()`` (registered with atexit).
    """

    def __init__(self, app=None):
        self.app = None
        self.store = None
        self.email_service = None
        self.notifier = None
        self._modules = []
        self._closed = False

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        # Imported here so the blueprints see a fully initialised package
        from .modules.admin import admin_bp
        from .modules.contact import contact_bp
        from .modules.email import EmailService, Notifier
        from .modules.feed import feed_bp
        from .modules.subscribers import subscribers_bp

        self.app = app
        self._load_config(app)
        validate_config(app.config)
        configure_logging(app)

        CORS(app, resources={r"/*": {"origins": "*"}}, send_wildcard=True,
             allow_headers=CORS_ALLOW_HEADERS, methods=CORS_METHODS)

        limiter.init_app(app)
        cache.init_app(app, config={
            'CACHE_TYPE': 'SimpleCache',
            'CACHE_DEFAULT_TIMEOUT': app.config['FEED_CACHE_TTL'],
            'CACHE_THRESHOLD': app.config['FEED_CACHE_THRESHOLD'],
        })

        self.store = create_store(app.config)
        self.store.open()
        logger.info(f"Storage backend: {app.config['STORAGE_BACKEND']}")

        self.email_service = EmailService(app)
        self.notifier = Notifier(max_workers=app.config['EMAIL_WORKERS'])

        for blueprint in (feed_bp, subscribers_bp, contact_bp, admin_bp):
            app.register_blueprint(blueprint)
            self._modules.append(blueprint.name)

        self._register_error_handlers(app)
        self._register_health_route(app)

        app.extensions['clueapi'] = self
        atexit.register(self.close)
        logger.info(f"ClueAPI initialised with modules: {', '.join(self._modules)}")

    @staticmethod
    def _load_config(app):
        """Fill in any keys the app has not set from ``Config``"""
        for key in dir(Config):
            if key.isupper():
                app.config.setdefault(key, getattr(Config, key))

    def _register_error_handlers(self, app):
        @app.errorhandler(429)
        def rate_limited(e):
            logger.warning(f"Rate limit exceeded for {get_client_ip()}: {e.description}")
            return jsonify({'error': e.description}), 429

        @app.errorhandler(404)
        def not_found(e):
            return jsonify({'error': 'Not found'}), 404

        @app.errorhandler(405)
        def method_not_allowed(e):
            return jsonify({'error': 'Method not allowed'}), 405

        @app.errorhandler(Exception)
        def unhandled(e):
            if isinstance(e, HTTPException):
                return jsonify({'error': e.description}), e.code
            logger.exception(f"Unhandled error: {e}")
            return jsonify({'error': 'Internal server error'}), 500

    @staticmethod
    def _register_health_route(app):
        @app.route('/health', methods=['GET'])
        def health():
            return jsonify({'status': 'ok'}), 200

    def get_registered_modules(self):
        return list(self._modules)

    def close(self):
        """Stop the notifier (letting queued sends finish) and close the store"""
        if self._closed:
            return
        self._closed = True
        atexit.unregister(self.close)
        if self.notifier is not None:
            self.notifier.shutdown(wait=True)
        if self.store is not None:
            self.store.close()


def create_app(config=None):
    """
    Application factory.

    Args:
        config: optional mapping of config overrides (applied before the
            environment defaults from ``Config``)

    Raises:
        ConfigError: if required secrets are missing
    """
    app = Flask(__name__)
    if config:
        app.config.update(config)
    ClueAPI(app)
    return app


__all__ = ['ClueAPI', 'create_app', '__version__']
