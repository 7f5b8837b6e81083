"""
Fire-and-forget change notifications.

Presentation layers (push notifications, chat, cache invalidation) learn
about ledger changes by connecting receivers to these signals. Emission is
not part of the transactional contract: signals are sent after the
surrounding transaction commits, receiver errors are logged and never
reach the caller.

Example:
    Listening for claims::

        from django.dispatch import receiver
        from apps.core.events import claim_changed

        @receiver(claim_changed)
        def invalidate_item_cache(sender, item_id, action, **kwargs):
            cache.delete(f"item:{item_id}")
"""

import logging

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

# kwargs: item_id, claim_id, actor_id, action ('claimed', 'unclaimed', 'split_opened')
claim_changed = Signal()

# kwargs: item_id, claim_id, actor_id, amount, is_fully_funded
pledge_changed = Signal()

# kwargs: celebration_id, leader_id, assigned_by, reason
leadership_changed = Signal()

# kwargs: celebration_id, actor_id, amount (None when removed)
contribution_changed = Signal()


def _dispatch(signal: Signal, sender, payload: dict) -> None:
    for receiver, response in signal.send_robust(sender=sender, **payload):
        if isinstance(response, Exception):
            logger.error(
                "Event receiver %r failed for %r",
                receiver, sender,
                exc_info=(type(response), response, response.__traceback__),
            )


def emit(signal: Signal, sender, **payload) -> None:
    """
    Send ``signal`` once the current transaction commits.

    Outside a transaction the signal is sent immediately.
    """
    transaction.on_commit(lambda: _dispatch(signal, sender, payload))
