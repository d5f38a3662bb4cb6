"""
ClueAPI Core
============

Configuration, persistence, logging and shared helpers used by the route
modules.
"""

from flask import current_app

from .config import Config, ConfigError, validate_config
from .database import Store, StoreError, DuplicateRecordError, SQLiteStore, create_store
from .logging_service import configure_logging


def get_extension():
    """The ``ClueAPI`` instance bound to the current app"""
    return current_app.extensions['clueapi']


def get_store():
    return get_extension().store


def get_notifier():
    return get_extension().notifier


def get_email_service():
    return get_extension().email_service


__all__ = [
    'Config', 'ConfigError', 'validate_config',
    'Store', 'StoreError', 'DuplicateRecordError', 'SQLiteStore', 'create_store',
    'configure_logging',
    'get_extension', 'get_store', 'get_notifier', 'get_email_service',
]
