"""
Retry-on-conflict helper for ledger writes.

Claim and pledge writes rely on the database to serialize concurrent
actors. When the backend reports a transient lock error instead of
blocking (SQLite does this under write contention), the whole transaction
is re-run. Domain errors raised by the service are never retried.
"""

import functools
import logging
import time

from django.conf import settings
from django.db import OperationalError

logger = logging.getLogger(__name__)

TRANSIENT_MARKERS = (
    'database is locked',
    'database table is locked',
    'deadlock detected',
    'could not serialize access',
    'lock wait timeout',
)


def _is_transient(exc: OperationalError) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def retry_on_conflict(func):
    """
    Re-run ``func`` when the database reports a transient lock conflict.

    The wrapped function must own its transaction (be decorated with or
    open ``transaction.atomic``) so that each attempt starts from a clean
    slate. Attempts and backoff come from ``GIFTING_WRITE_RETRIES`` and
    ``GIFTING_RETRY_BACKOFF_SECONDS``.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        attempts = max(1, getattr(settings, 'GIFTING_WRITE_RETRIES', 5))
        backoff = getattr(settings, 'GIFTING_RETRY_BACKOFF_SECONDS', 0.05)

        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except OperationalError as exc:
                if not _is_transient(exc) or attempt == attempts:
                    raise
                logger.warning(
                    "Transient conflict in %s (attempt %d/%d): %s",
                    func.__name__, attempt, attempts, exc,
                )
                time.sleep(backoff * attempt)

    return wrapper
