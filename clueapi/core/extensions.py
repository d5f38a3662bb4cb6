"""
Shared Flask extensions.

Both objects are bound to an application in ``ClueAPI.init_app``; the rate
limit counters and cached feeds live in that application's extension state.
"""

from flask_caching import Cache
from flask_limiter import Limiter

from .utils import get_client_ip

# Sliding window per client IP (first X-Forwarded-For hop when present)
limiter = Limiter(key_func=get_client_ip, strategy='moving-window')

# Time-to-live cache for proxied feeds
cache = Cache()
