import os
from dotenv import load_dotenv

load_dotenv(override=True)


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class ConfigError(Exception):
    """Raised when required configuration is missing at startup"""


class Config:
    """
    Base configuration for the Clue Analytics backend.
    All secrets come from the environment (or a .env file).
    """
    # Admin basic-auth password
    API_KEY = os.getenv('API_KEY')

    # Email settings (Resend)
    NOTIFICATIONS_ENABLED = _env_flag('NOTIFICATIONS_ENABLED', True)
    RESEND_API_KEY = os.getenv('RESEND_API_KEY')
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL')
    EMAIL_ADDRESS = os.getenv('EMAIL_ADDRESS', 'onboarding@resend.dev')
    EMAIL_BRAND_NAME = os.getenv('EMAIL_BRAND_NAME', 'Clue Analytics')
    EMAIL_WEBSITE_URL = os.getenv('EMAIL_WEBSITE_URL', 'https://jinka97.github.io/clue-analytics/')
    EMAIL_SUPPORT_EMAIL = os.getenv('EMAIL_SUPPORT_EMAIL', 'support@clueanalytics.com')
    EMAIL_WORKERS = int(os.getenv('EMAIL_WORKERS', '2'))

    # Storage: 'sqlite' or 'firebase'
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'sqlite').lower()
    SUBSCRIBERS_DB = os.getenv('SUBSCRIBERS_DB', os.path.join(os.getcwd(), 'subscribers.db'))
    FIREBASE_DATABASE_URL = os.getenv('FIREBASE_DATABASE_URL')
    FIREBASE_AUTH_TOKEN = os.getenv('FIREBASE_AUTH_TOKEN')
    FIREBASE_TIMEOUT = float(os.getenv('FIREBASE_TIMEOUT', '10'))

    # Feed proxy
    FEED_CACHE_TTL = int(os.getenv('FEED_CACHE_TTL', '3600'))
    FEED_CACHE_THRESHOLD = int(os.getenv('FEED_CACHE_THRESHOLD', '1000'))
    FEED_FETCH_TIMEOUT = float(os.getenv('FEED_FETCH_TIMEOUT', '15'))
    FEED_USER_AGENT = 'Mozilla/5.0 (compatible; ClueAnalyticsBot/1.0)'

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    SUBSCRIBE_RATE_LIMIT = os.getenv('SUBSCRIBE_RATE_LIMIT', '10 per 15 minutes')
    CONTACT_RATE_LIMIT = os.getenv('CONTACT_RATE_LIMIT', '5 per 15 minutes')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Port for local server
    PORT = int(os.getenv('PORT', '10000'))


def validate_config(config):
    """
    Check that the secrets needed to serve are present.

    Args:
        config: a mapping such as ``app.config``

    Raises:
        ConfigError: naming every missing key
    """
    required = ['API_KEY']
    if config.get('NOTIFICATIONS_ENABLED', True):
        required += ['RESEND_API_KEY', 'ADMIN_EMAIL']
    if config.get('STORAGE_BACKEND', 'sqlite') == 'firebase':
        required.append('FIREBASE_DATABASE_URL')

    missing = [key for key in required if not config.get(key)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    backend = config.get('STORAGE_BACKEND', 'sqlite')
    if backend not in ('sqlite', 'firebase'):
        raise ConfigError(f"Unknown STORAGE_BACKEND '{backend}' (expected 'sqlite' or 'firebase')")
