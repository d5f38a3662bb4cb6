"""
Critical Integration Tests for ClueAPI
=====================================

Focused tests covering app start-up, configuration and the HTTP edge
(CORS, error responses, route registration).
"""

import os
from unittest.mock import patch

import pytest
from flask import Flask

from clueapi import ClueAPI, create_app
from clueapi.core.config import Config, ConfigError, validate_config


# ---------------------------------------------------------------------------
# 1. Framework initialisation -- ClueAPI(app) registers itself and modules
# ---------------------------------------------------------------------------

EXPECTED_MODULES = ["feed", "subscribers", "contact", "admin"]


def test_framework_initialisation(app_config):
    app = Flask(__name__)
    app.config.update(app_config)

    ext = ClueAPI(app)
    try:
        assert app.extensions["clueapi"] is ext
        assert ext.get_registered_modules() == EXPECTED_MODULES
        assert ext.store is not None
        assert ext.notifier is not None
    finally:
        ext.close()


def test_close_drops_exit_hook(app_config):
    with patch("clueapi.atexit") as exit_hooks:
        app = create_app(app_config)
        ext = app.extensions["clueapi"]
        exit_hooks.register.assert_called_once_with(ext.close)

        ext.close()
        ext.close()

    exit_hooks.unregister.assert_called_once_with(ext.close)


def test_routes_registered(app):
    rules = {rule.rule: rule.methods for rule in app.url_map.iter_rules()}
    assert "GET" in rules["/fetch-feed"]
    assert "POST" in rules["/subscribe"]
    assert "POST" in rules["/contact"]
    assert "GET" in rules["/subscribers"]
    assert "GET" in rules["/messages"]


def test_sqlite_file_created(app, app_config):
    assert os.path.isfile(app_config["SUBSCRIBERS_DB"])


def test_config_defaults_applied(app):
    assert app.config["PORT"] == int(os.getenv("PORT", "10000"))
    assert app.config["SUBSCRIBE_RATE_LIMIT"] == "10 per 15 minutes"
    assert app.config["CONTACT_RATE_LIMIT"] == "5 per 15 minutes"
    assert app.config["FEED_USER_AGENT"] == "Mozilla/5.0 (compatible; ClueAnalyticsBot/1.0)"
    assert app.config["EMAIL_WORKERS"] == 2
    assert app.config["FIREBASE_TIMEOUT"] == 10
    assert app.config["FEED_CACHE_THRESHOLD"] == 1000


def test_env_example_lists_every_setting():
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    with open(os.path.join(root, ".env.example")) as f:
        documented = {line.lstrip("# ").split("=", 1)[0] for line in f if "=" in line}

    settings = {key for key in dir(Config) if key.isupper()} - {"FEED_USER_AGENT"}
    assert settings - documented == set()


# ---------------------------------------------------------------------------
# 2. Config validation -- missing secrets are fatal
# ---------------------------------------------------------------------------

def test_missing_api_key_is_fatal(app_config):
    app_config["API_KEY"] = ""
    with pytest.raises(ConfigError) as exc:
        create_app(app_config)
    assert "API_KEY" in str(exc.value)


def test_email_secrets_required_when_notifications_enabled():
    with pytest.raises(ConfigError) as exc:
        validate_config({"API_KEY": "k", "NOTIFICATIONS_ENABLED": True,
                         "RESEND_API_KEY": None, "ADMIN_EMAIL": ""})
    message = str(exc.value)
    assert "RESEND_API_KEY" in message
    assert "ADMIN_EMAIL" in message


def test_email_secrets_optional_when_notifications_disabled():
    validate_config({"API_KEY": "k", "NOTIFICATIONS_ENABLED": False})


def test_firebase_requires_database_url():
    with pytest.raises(ConfigError) as exc:
        validate_config({"API_KEY": "k", "NOTIFICATIONS_ENABLED": False,
                         "STORAGE_BACKEND": "firebase"})
    assert "FIREBASE_DATABASE_URL" in str(exc.value)


def test_unknown_backend_rejected():
    with pytest.raises(ConfigError):
        validate_config({"API_KEY": "k", "NOTIFICATIONS_ENABLED": False,
                         "STORAGE_BACKEND": "mongo"})


def test_server_exits_on_config_error():
    from clueapi import server

    with patch.object(server, "create_app", side_effect=ConfigError("Missing API_KEY")):
        with pytest.raises(SystemExit) as exc:
            server.create_wsgi_app()
    assert exc.value.code == 1


# ---------------------------------------------------------------------------
# 3. HTTP edge -- CORS headers and JSON error bodies
# ---------------------------------------------------------------------------

def test_cors_allow_origin_on_simple_request(client):
    response = client.get("/health", headers={"Origin": "https://example.org"})
    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "*"


def test_cors_preflight(client):
    response = client.options("/subscribe", headers={
        "Origin": "https://example.org",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "Content-Type, Authorization",
    })
    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "*"
    methods = response.headers.get("Access-Control-Allow-Methods", "")
    for method in ("GET", "POST", "OPTIONS"):
        assert method in methods
    allowed = response.headers.get("Access-Control-Allow-Headers", "").lower()
    assert "content-type" in allowed
    assert "authorization" in allowed


def test_cors_wildcard_on_rejected_post(client):
    response = client.post("/subscribe", json={"email": "nope"},
                           headers={"Origin": "https://other.example"})
    assert response.status_code == 400
    assert response.headers.get("Access-Control-Allow-Origin") == "*"


def test_unknown_route_returns_json_404(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Not found"}


def test_wrong_method_returns_json_405(client):
    response = client.get("/subscribe")
    assert response.status_code == 405
    assert response.get_json() == {"error": "Method not allowed"}


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
