"""
Contribution ledger service.

Free-form contributions toward a celebration's general gift fund (not tied
to a wishlist item). Each member has at most one row per celebration;
contributing again replaces the amount, so totals never double count.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count, QuerySet, Sum

from apps.celebrations.models import Celebration, CelebrationContribution
from apps.core.events import contribution_changed, emit
from apps.core.exceptions import (
    CelebrationClosedError,
    CelebrationNotFoundError,
    ContributionNotFoundError,
    NotAuthorizedError,
)
from apps.core.money import ZERO, clamp_ratio, to_amount
from apps.core.retry import retry_on_conflict
from apps.groups.services import is_group_member

logger = logging.getLogger(__name__)


def _get_celebration(celebration_id: UUID, *, lock: bool = False) -> Celebration:
    queryset = Celebration.objects.select_for_update() if lock else Celebration.objects
    try:
        return queryset.get(id=celebration_id)
    except Celebration.DoesNotExist:
        raise CelebrationNotFoundError(f"Celebration with ID {celebration_id} not found")


def _summarize(celebration: Celebration) -> dict:
    totals = CelebrationContribution.objects.filter(celebration=celebration).aggregate(
        total=Sum('amount'),
        contributors=Count('id'),
    )
    total = totals['total'] or ZERO
    target = celebration.target_amount

    progress = None
    is_complete = False
    if target is not None and target > 0:
        progress = clamp_ratio(total, target)
        is_complete = total >= target

    return {
        'celebration_id': celebration.id,
        'total': total,
        'contributor_count': totals['contributors'],
        'target_amount': target,
        'progress': progress,
        'is_complete': is_complete,
    }


@retry_on_conflict
@transaction.atomic
def add_or_update_contribution(
    *,
    celebration_id: UUID,
    actor_id: UUID,
    amount: Decimal
) -> dict:
    """
    Set the actor's contribution to a celebration (upsert).

    Args:
        celebration_id: UUID of the celebration
        actor_id: UUID of the contributing member
        amount: New contribution amount (replaces any previous amount)

    Returns:
        dict: Contribution totals containing:
            - celebration_id (UUID)
            - total (Decimal): Sum of the latest amount per contributor
            - contributor_count (int)
            - target_amount (Decimal | None)
            - progress (Decimal | None): total / target clamped to [0, 1]
            - is_complete (bool): total >= target

    Raises:
        InvalidAmountError: If amount is not greater than 0
        CelebrationNotFoundError: If celebration doesn't exist
        CelebrationClosedError: If celebration is completed
        NotAuthorizedError: If actor is the celebrant or not a group member
    """
    amount = to_amount(amount, field='Contribution amount')
    celebration = _get_celebration(celebration_id, lock=True)

    if celebration.is_terminal:
        raise CelebrationClosedError("Cannot contribute to a completed celebration")

    if str(celebration.celebrant_id) == str(actor_id):
        raise NotAuthorizedError("The celebrant cannot contribute to their own celebration")

    if not is_group_member(celebration.group_id, actor_id):
        raise NotAuthorizedError("You must be a group member to contribute")

    _, created = CelebrationContribution.objects.update_or_create(
        celebration=celebration,
        user_id=actor_id,
        defaults={'amount': amount},
    )

    emit(
        contribution_changed,
        sender=CelebrationContribution,
        celebration_id=celebration.id,
        actor_id=actor_id,
        amount=amount,
    )
    logger.info(
        "Contribution %s for celebration %s by %s: %s",
        'added' if created else 'updated', celebration.id, actor_id, amount,
    )
    return _summarize(celebration)


@transaction.atomic
def remove_contribution(*, celebration_id: UUID, actor_id: UUID) -> dict:
    """
    Withdraw the actor's own contribution.

    Raises:
        CelebrationNotFoundError: If celebration doesn't exist
        CelebrationClosedError: If celebration is completed
        ContributionNotFoundError: If the actor has no contribution
    """
    celebration = _get_celebration(celebration_id, lock=True)

    if celebration.is_terminal:
        raise CelebrationClosedError("Cannot change contributions of a completed celebration")

    deleted, _ = CelebrationContribution.objects.filter(
        celebration=celebration,
        user_id=actor_id,
    ).delete()
    if not deleted:
        raise ContributionNotFoundError("You have not contributed to this celebration")

    emit(
        contribution_changed,
        sender=CelebrationContribution,
        celebration_id=celebration.id,
        actor_id=actor_id,
        amount=None,
    )
    return _summarize(celebration)


def get_contribution_total(*, celebration_id: UUID) -> dict:
    """
    Get contribution totals for a celebration.

    Recomputed from the contribution rows on every call.

    Raises:
        CelebrationNotFoundError: If celebration doesn't exist
    """
    return _summarize(_get_celebration(celebration_id))


def get_contributions(*, celebration_id: UUID) -> QuerySet[CelebrationContribution]:
    """Get all contributions for a celebration, largest first."""
    return (
        CelebrationContribution.objects
        .filter(celebration_id=celebration_id)
        .select_related('user')
        .order_by('-amount', 'created_at')
    )


def get_user_contribution(
    *,
    celebration_id: UUID,
    user_id: UUID
) -> Optional[CelebrationContribution]:
    """Get a user's contribution, or None if they haven't contributed."""
    return (
        CelebrationContribution.objects
        .filter(celebration_id=celebration_id, user_id=user_id)
        .first()
    )
