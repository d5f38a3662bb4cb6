"""
Subscribers Routes
==================

POST /subscribe with ``{"email": "..."}``:
- 200 on a new subscription (confirmation email sent in the background)
- 400 for a missing or malformed email
- 409 if the email is already subscribed
- 429 after SUBSCRIBE_RATE_LIMIT requests from one client
- 500 on any other store failure
"""

import logging

from flask import request, jsonify, current_app

from ...core import get_store, get_notifier, get_email_service
from ...core.database import StoreError, DuplicateRecordError
from ...core.extensions import limiter
from ...core.utils import validate_email, require_string_fields
from . import subscribers_bp

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = 'Too many subscription attempts from this IP, please try again later.'


def _subscribe_limit():
    return current_app.config['SUBSCRIBE_RATE_LIMIT']


@subscribers_bp.route('/subscribe', methods=['POST'])
@limiter.limit(_subscribe_limit, methods=['POST'], error_message=RATE_LIMIT_MESSAGE)
def subscribe():
    """Handle new subscription requests"""
    data = request.get_json(silent=True)

    error = require_string_fields(data, ['email'])
    if error:
        return jsonify({'error': error}), 400

    email = data['email']
    if not validate_email(email):
        return jsonify({'error': 'Invalid email address'}), 400

    try:
        subscriber = get_store().insert_unique('subscribers', 'email', {'email': email})
    except DuplicateRecordError:
        logger.info(f"Duplicate subscription attempt: {email}")
        return jsonify({'error': 'Email already subscribed'}), 409
    except StoreError as e:
        logger.error(f"Error inserting email: {e}")
        return jsonify({'error': 'Failed to subscribe'}), 500

    logger.info(f"Subscribed email: {email} (id {subscriber.get('id')})")

    email_service = get_email_service()
    if email_service.enabled:
        get_notifier().dispatch(
            f"confirmation email to {email}",
            email_service.send_subscription_confirmation,
            email,
        )

    return jsonify({'message': 'Successfully subscribed!'}), 200
