"""
Subscribers Module
==================

Provides:
- POST /subscribe -- newsletter signup (rate limited per client IP)
"""

from flask import Blueprint

subscribers_bp = Blueprint('subscribers', __name__)

from . import routes
