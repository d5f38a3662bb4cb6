"""
Admin Module
============

Read-only endpoints for the site admin, protected by HTTP basic auth
(username ``admin``, password = API_KEY).

Provides:
- GET /subscribers -- all subscribers, newest first
- GET /messages -- all contact messages, newest first
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from . import routes
