"""
Feed Module
===========

Provides:
- GET /fetch-feed?url= -- proxy an external RSS/Atom feed, cached by URL
"""

from flask import Blueprint

feed_bp = Blueprint('feed', __name__)

from . import routes
