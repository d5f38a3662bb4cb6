import re
from flask import request

# Coarse shape check: something@something.something, no whitespace or extra '@'.
# Deliberately permissive; it is not RFC address validation.
EMAIL_REGEX = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')


def validate_email(email):
    """Validate email format"""
    if not email or not isinstance(email, str):
        return False
    return EMAIL_REGEX.fullmatch(email) is not None


def get_client_ip():
    """Get client IP address from request, trusting the first X-Forwarded-For hop"""
    forwarded_for = request.headers.get('X-Forwarded-For')
    if forwarded_for:
        first_hop = forwarded_for.split(',')[0].strip()
        if first_hop:
            return first_hop
    return request.remote_addr or '127.0.0.1'


def require_string_fields(data, fields):
    """
    Return the error message for the first field that is missing or not a
    non-empty string, or None if all are present.
    """
    if not isinstance(data, dict):
        data = {}
    for field in fields:
        value = data.get(field)
        if not value or not isinstance(value, str):
            return f"{field.capitalize()} is required and must be a string"
    return None
