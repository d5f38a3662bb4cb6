"""
Feed Routes
===========

The front end cannot read third-party feeds directly (CORS), so this proxy
fetches them server-side. Responses are cached per exact URL string for
FEED_CACHE_TTL seconds; there is no manual invalidation.
"""

import logging

import requests
from flask import request, jsonify, current_app, Response

from ...core.extensions import cache
from . import feed_bp

logger = logging.getLogger(__name__)

CACHE_PREFIX = 'feed:'


def _cache_key(url):
    return CACHE_PREFIX + url


def fetch_remote_feed(url):
    """
    Fetch ``url`` once, no retries.

    Returns:
        dict: ``{'body': bytes, 'content_type': str}``

    Raises:
        requests.RequestException: on network errors, timeouts or non-2xx status
    """
    response = requests.get(
        url,
        headers={'User-Agent': current_app.config['FEED_USER_AGENT']},
        timeout=current_app.config.get('FEED_FETCH_TIMEOUT'),
    )
    response.raise_for_status()
    return {
        'body': response.content,
        'content_type': response.headers.get('Content-Type', 'application/xml'),
    }


@feed_bp.route('/fetch-feed', methods=['GET'])
def fetch_feed():
    """Return a cached copy of the feed at ?url=, fetching it on a miss"""
    url = request.args.get('url', '')
    if not url:
        return jsonify({'error': 'URL parameter is required'}), 400

    cached = cache.get(_cache_key(url))
    if cached is not None:
        logger.info(f"Serving cached feed for {url}")
        return Response(cached['body'], status=200, content_type=cached['content_type'])

    try:
        feed = fetch_remote_feed(url)
    except requests.RequestException as e:
        logger.error(f"Error fetching feed from {url}: {e}")
        return jsonify({'error': 'Failed to fetch feed'}), 500

    cache.set(_cache_key(url), feed)
    logger.info(f"Fetched and cached feed for {url}")

    return Response(feed['body'], status=200, content_type=feed['content_type'])
