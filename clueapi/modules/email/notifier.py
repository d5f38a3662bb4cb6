"""
Background dispatch for notification emails.

Handlers decide their HTTP response first, then hand the send to the
notifier. A failed send is logged here and never reaches the client.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait as wait_futures

logger = logging.getLogger(__name__)


class Notifier:
    """Runs email sends on a small thread pool"""

    def __init__(self, max_workers=2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix='clueapi-mail')
        self._pending = set()
        self._lock = threading.Lock()
        self._closed = False

    def dispatch(self, description, fn, *args, **kwargs):
        """
        Schedule ``fn(*args, **kwargs)`` and return its Future.

        Returns None if the notifier is already shut down.
        """
        with self._lock:
            if self._closed:
                logger.warning(f"Notifier closed - dropping {description}")
                return None
            future = self._executor.submit(self._run, description, fn, *args, **kwargs)
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    @staticmethod
    def _run(description, fn, *args, **kwargs):
        try:
            sent = fn(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error sending {description}: {e}")
            return False

        if sent:
            logger.info(f"Sent {description}")
        else:
            logger.warning(f"Could not send {description}")
        return bool(sent)

    def _discard(self, future):
        with self._lock:
            self._pending.discard(future)

    def wait(self, timeout=None):
        """Block until every pending send has finished"""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait_futures(pending, timeout=timeout)

    def shutdown(self, wait=True):
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait)
        logger.info("Notifier shut down")
