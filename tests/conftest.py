"""
Shared fixtures for the ClueAPI test suite.

Run with: pytest tests -v

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import base64
import os
import shutil
import tempfile

import pytest

from clueapi import create_app

API_KEY = "test-api-key"


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="clueapi-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app_config(tmp_db_dir):
    """Config overrides for a fully local app: SQLite file, no emails."""
    return {
        "TESTING": True,
        "API_KEY": API_KEY,
        "NOTIFICATIONS_ENABLED": False,
        "STORAGE_BACKEND": "sqlite",
        "SUBSCRIBERS_DB": os.path.join(tmp_db_dir, "subscribers.db"),
        "RATELIMIT_STORAGE_URI": "memory://",
        "FEED_CACHE_TTL": 3600,
    }


@pytest.fixture
def app(app_config):
    app = create_app(app_config)
    yield app
    app.extensions["clueapi"].close()


@pytest.fixture
def client(app):
    return app.test_client()


def _basic_auth(username, password):
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def basic_auth():
    """Build an Authorization header for arbitrary credentials."""
    return _basic_auth


@pytest.fixture
def admin_headers():
    return _basic_auth("admin", API_KEY)
