"""
Persistence layer.

``Store`` is the storage interface used by the route handlers. Two backends
implement it: ``SQLiteStore`` (embedded database file) and ``FirebaseStore``
(hosted Realtime Database, see ``firebase.py``). ``create_store`` picks one
from the app config.
"""

import logging
import os
import sqlite3
import threading
from collections import namedtuple

logger = logging.getLogger(__name__)

Collection = namedtuple('Collection', ['name', 'fields', 'timestamp_field', 'unique_field'])

COLLECTIONS = {
    'subscribers': Collection('subscribers', ('email',), 'subscribed_at', 'email'),
    'messages': Collection('messages', ('name', 'email', 'message'), 'sent_at', None),
}

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%f'


class StoreError(Exception):
    """Raised when the backing store cannot complete an operation"""


class DuplicateRecordError(StoreError):
    """Raised when a unique insert finds an existing record"""


def get_collection(name):
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise StoreError(f"Unknown collection: {name}")


class Store:
    """Storage interface shared by all backends"""

    def open(self):
        """Acquire resources and make sure the collections exist"""

    def close(self):
        """Release resources"""

    def insert_unique(self, collection, field, record):
        """
        Insert ``record`` unless a record with the same ``field`` value exists.

        Returns:
            dict: the stored record including ``id`` and its timestamp

        Raises:
            DuplicateRecordError: if the value is already stored
            StoreError: on any other backend failure
        """
        raise NotImplementedError

    def insert_append(self, collection, record):
        """Insert ``record`` with no uniqueness check and return it as stored"""
        raise NotImplementedError

    def list_ordered(self, collection):
        """Return every record of ``collection``, newest first"""
        raise NotImplementedError


class SQLiteStore(Store):
    """Embedded SQLite backend with a single long-lived connection"""

    def __init__(self, path):
        self.path = path
        self._conn = None
        self._lock = threading.Lock()

    def open(self):
        if self._conn is not None:
            return
        db_dir = os.path.dirname(self.path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._init_tables()
        except sqlite3.Error as e:
            logger.error(f"Error opening database {self.path}: {e}")
            raise StoreError(f"Could not open database: {e}") from e
        logger.info(f"Connected to SQLite database at {self.path}")

    def _init_tables(self):
        """Initialize the subscribers and messages tables"""
        with self._lock:
            cursor = self._conn.cursor()
            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS subscribers (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT NOT NULL UNIQUE,
                    subscribed_at TIMESTAMP DEFAULT (strftime('{TIMESTAMP_FORMAT}', 'now'))
                )
            ''')
            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    message TEXT NOT NULL,
                    sent_at TIMESTAMP DEFAULT (strftime('{TIMESTAMP_FORMAT}', 'now'))
                )
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_subscribers_subscribed_at
                ON subscribers(subscribed_at)
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_messages_sent_at
                ON messages(sent_at)
            ''')
            self._conn.commit()
        logger.info("Subscribers and messages tables ready")

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("SQLite database connection closed")

    def _connection(self):
        if self._conn is None:
            raise StoreError("Database is not open")
        return self._conn

    def _insert(self, spec, record):
        columns = ', '.join(spec.fields)
        placeholders = ', '.join('?' for _ in spec.fields)
        values = [record[field] for field in spec.fields]

        with self._lock:
            conn = self._connection()
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"INSERT INTO {spec.name} ({columns}) VALUES ({placeholders})",
                    values
                )
                row_id = cursor.lastrowid
                conn.commit()
                cursor.execute(f"SELECT * FROM {spec.name} WHERE id = ?", (row_id,))
                return dict(cursor.fetchone())
            except sqlite3.Error:
                conn.rollback()
                raise

    def insert_unique(self, collection, field, record):
        spec = get_collection(collection)
        if spec.unique_field != field:
            raise StoreError(f"{collection}.{field} is not a unique field")
        try:
            return self._insert(spec, record)
        except sqlite3.IntegrityError as e:
            if 'UNIQUE constraint failed' in str(e):
                raise DuplicateRecordError(f"{collection}.{field} already exists") from e
            raise StoreError(str(e)) from e
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def insert_append(self, collection, record):
        spec = get_collection(collection)
        try:
            return self._insert(spec, record)
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def list_ordered(self, collection):
        spec = get_collection(collection)
        try:
            with self._lock:
                cursor = self._connection().cursor()
                cursor.execute(
                    f"SELECT * FROM {spec.name} ORDER BY {spec.timestamp_field} DESC, id DESC"
                )
                return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e


def create_store(config):
    """Build the store selected by ``STORAGE_BACKEND``"""
    backend = config.get('STORAGE_BACKEND', 'sqlite')
    if backend == 'firebase':
        from .firebase import FirebaseStore
        return FirebaseStore(
            config['FIREBASE_DATABASE_URL'],
            auth_token=config.get('FIREBASE_AUTH_TOKEN'),
            timeout=config.get('FIREBASE_TIMEOUT'),
        )
    return SQLiteStore(config['SUBSCRIBERS_DB'])
