"""
Firebase Realtime Database backend
==================================

Talks to the database's REST API with ``requests``.

- Unique inserts write to ``/<collection>/<sha256(value)>.json`` with
  ``if-match: null_etag`` so the write only succeeds if nothing is stored
  there yet; Firebase answers 412 otherwise.
- Appends use ``POST /<collection>.json`` (Firebase generates the push ID).
- Timestamps are assigned by the server (``{".sv": "timestamp"}``) and
  returned in the same string format as the SQLite backend.
- Listings sort by server timestamp, then by key. Push IDs sort in creation
  order, so equal-timestamp messages still come back newest first; subscriber
  keys are hashes, so equal-timestamp subscribers come back in arbitrary order.
"""

import hashlib
import logging
from datetime import datetime, timezone

import requests

from .database import Store, StoreError, DuplicateRecordError, get_collection

logger = logging.getLogger(__name__)

SERVER_TIMESTAMP = {'.sv': 'timestamp'}


def format_timestamp(value):
    """Convert Firebase epoch milliseconds to 'YYYY-MM-DD HH:MM:SS.fff' (UTC)"""
    if not isinstance(value, (int, float)):
        return value
    dt = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    return dt.strftime('%Y-%m-%d %H:%M:%S.') + f"{dt.microsecond // 1000:03d}"


def unique_key(value):
    """Firebase keys cannot contain . $ # [ ] / so hash the value instead"""
    return hashlib.sha256(value.encode('utf-8')).hexdigest()


class FirebaseStore(Store):
    """Hosted Realtime Database backend"""

    def __init__(self, database_url, auth_token=None, timeout=None, session=None):
        self.database_url = database_url.rstrip('/')
        self.auth_token = auth_token
        self.timeout = timeout
        self.session = session
        self._owns_session = session is None

    def open(self):
        if self.session is None:
            self.session = requests.Session()
            self._owns_session = True
        logger.info(f"Using Firebase Realtime Database at {self.database_url}")

    def close(self):
        if self.session is not None and self._owns_session:
            self.session.close()
            self.session = None

    def _url(self, *parts):
        return f"{self.database_url}/{'/'.join(parts)}.json"

    def _params(self):
        return {'auth': self.auth_token} if self.auth_token else None

    def _request(self, method, url, **kwargs):
        if self.session is None:
            raise StoreError("Firebase session is not open")
        try:
            return self.session.request(
                method, url, params=self._params(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise StoreError(f"Firebase request failed: {e}") from e

    @staticmethod
    def _check(response, action):
        if not 200 <= response.status_code < 300:
            raise StoreError(f"Firebase {action} failed: HTTP {response.status_code} {response.text[:200]}")
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Firebase {action} returned invalid JSON") from e

    @staticmethod
    def _to_record(key, data, spec):
        record = {'id': key}
        for field in spec.fields:
            record[field] = data.get(field)
        record[spec.timestamp_field] = format_timestamp(data.get(spec.timestamp_field))
        return record

    def _payload(self, spec, record):
        payload = {field: record[field] for field in spec.fields}
        payload[spec.timestamp_field] = SERVER_TIMESTAMP
        return payload

    def insert_unique(self, collection, field, record):
        spec = get_collection(collection)
        if spec.unique_field != field:
            raise StoreError(f"{collection}.{field} is not a unique field")

        key = unique_key(record[field])
        response = self._request(
            'PUT',
            self._url(spec.name, key),
            json=self._payload(spec, record),
            headers={'if-match': 'null_etag'},
        )
        if response.status_code == 412:
            raise DuplicateRecordError(f"{collection}.{field} already exists")
        data = self._check(response, 'write')
        return self._to_record(key, data or {}, spec)

    def insert_append(self, collection, record):
        spec = get_collection(collection)
        payload = self._payload(spec, record)
        response = self._request('POST', self._url(spec.name), json=payload)
        data = self._check(response, 'write')
        key = (data or {}).get('name')
        if not key:
            raise StoreError("Firebase write returned no key")

        # POST only returns the generated key; read back the resolved timestamp
        response = self._request('GET', self._url(spec.name, key))
        stored = self._check(response, 'read') or {}
        return self._to_record(key, stored, spec)

    def list_ordered(self, collection):
        spec = get_collection(collection)
        response = self._request('GET', self._url(spec.name))
        data = self._check(response, 'read') or {}

        entries = sorted(
            data.items(),
            key=lambda item: (item[1].get(spec.timestamp_field) or 0, item[0]),
            reverse=True,
        )
        return [self._to_record(key, value, spec) for key, value in entries]
