"""
Contact Module
==============

Provides:
- POST /contact -- contact-form submission (rate limited per client IP)
"""

from flask import Blueprint

contact_bp = Blueprint('contact', __name__)

from . import routes
