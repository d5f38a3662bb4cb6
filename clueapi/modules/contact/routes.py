import logging

from flask import request, jsonify, current_app

from ...core import get_store, get_notifier, get_email_service
from ...core.database import StoreError
from ...core.extensions import limiter
from ...core.utils import validate_email, require_string_fields
from . import contact_bp

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = 'Too many contact messages from this IP, please try again later.'


def _contact_limit():
    return current_app.config['CONTACT_RATE_LIMIT']


@contact_bp.route('/contact', methods=['POST'])
@limiter.limit(_contact_limit, methods=['POST'], error_message=RATE_LIMIT_MESSAGE)
def contact():
    """Store a contact-form message and notify the admin"""
    data = request.get_json(silent=True)

    error = require_string_fields(data, ['name', 'email', 'message'])
    if error:
        return jsonify({'error': error}), 400

    name, email, message = data['name'], data['email'], data['message']
    if not validate_email(email):
        return jsonify({'error': 'Invalid email address'}), 400

    try:
        get_store().insert_append('messages', {'name': name, 'email': email, 'message': message})
    except StoreError as e:
        logger.error(f"Error inserting message: {e}")
        return jsonify({'error': 'Failed to send message'}), 500

    logger.info(f"Message received from {name} ({email})")

    email_service = get_email_service()
    if email_service.enabled:
        get_notifier().dispatch(
            f"admin notification for message from {name}",
            email_service.send_contact_notification,
            name, email, message,
        )

    return jsonify({'message': 'Message sent successfully!'}), 200
