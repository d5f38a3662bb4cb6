import hmac
import logging
from functools import wraps

from flask import request, jsonify, current_app

from ...core import get_store
from ...core.database import StoreError
from ...core.utils import get_client_ip
from . import admin_bp

logger = logging.getLogger(__name__)

ADMIN_USERNAME = 'admin'
AUTH_REALM = 'Clue Analytics Admin'


def check_credentials(auth):
    """Compare basic-auth credentials against the admin user and API_KEY"""
    api_key = current_app.config.get('API_KEY')
    if not auth or not api_key:
        return False
    username = auth.username or ''
    password = auth.password or ''
    user_ok = hmac.compare_digest(username.encode('utf-8'), ADMIN_USERNAME.encode('utf-8'))
    pass_ok = hmac.compare_digest(password.encode('utf-8'), api_key.encode('utf-8'))
    return user_ok and pass_ok


def require_admin(f):
    """Decorator to require valid admin basic-auth credentials"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not check_credentials(request.authorization):
            logger.warning(f"Unauthorized admin request to {request.path} from {get_client_ip()}")
            response = jsonify({'error': 'Unauthorized'})
            response.status_code = 401
            response.headers['WWW-Authenticate'] = f'Basic realm="{AUTH_REALM}"'
            return response
        return f(*args, **kwargs)
    return decorated_function


@admin_bp.route('/subscribers', methods=['GET'])
@require_admin
def list_subscribers():
    """Return all subscribers, newest first"""
    try:
        rows = get_store().list_ordered('subscribers')
    except StoreError as e:
        logger.error(f"Error retrieving subscribers: {e}")
        return jsonify({'error': 'Failed to retrieve subscribers'}), 500
    return jsonify(rows), 200


@admin_bp.route('/messages', methods=['GET'])
@require_admin
def list_messages():
    """Return all contact messages, newest first"""
    try:
        rows = get_store().list_ordered('messages')
    except StoreError as e:
        logger.error(f"Error retrieving messages: {e}")
        return jsonify({'error': 'Failed to retrieve messages'}), 500
    return jsonify(rows), 200
