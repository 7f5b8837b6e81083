"""
Celebration management service.

Creates celebrations with an automatically rotated Gift Leader and serves
the celebrant-excluding reads.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import DecimalField, QuerySet, Sum, Value
from django.db.models.functions import Coalesce

from apps.accounts.models import User
from apps.celebrations.models import Celebration, CelebrationStatus
from apps.core.exceptions import (
    CelebrantNotFoundError,
    CelebrationClosedError,
    CelebrationNotFoundError,
    NotAuthorizedError,
)
from apps.core.money import ZERO, to_amount
from apps.groups.services import get_group, is_group_admin, is_group_member

from .leadership_assignment import assign_initial_leader
from .rotation_planning import roster_for_group

logger = logging.getLogger(__name__)


def _with_totals(queryset: QuerySet) -> QuerySet:
    return queryset.annotate(
        total_contributed=Coalesce(
            Sum('contributions__amount'),
            Value(Decimal('0.00')),
            output_field=DecimalField(max_digits=12, decimal_places=2),
        )
    )


@transaction.atomic
def create_celebration(
    *,
    group_id: UUID,
    celebrant_id: UUID,
    event_date: date,
    created_by_id: UUID,
    target_amount: Optional[Decimal] = None,
    is_admin: Optional[Callable[[UUID, UUID], bool]] = None
) -> Celebration:
    """
    Create a celebration and assign its first Gift Leader.

    This is a multi-step operation wrapped in a transaction:
    1. Verify the creator is a group admin
    2. Create the celebration in ``upcoming`` status
    3. Run the rotation over the current roster and store the leader

    If the rotation fails (too few members, celebrant not in the group)
    nothing is created.

    Args:
        group_id: UUID of the group
        celebrant_id: UUID of the member being celebrated
        event_date: Date of the event
        created_by_id: UUID of the admin creating the celebration
        target_amount: Optional pooled contribution target
        is_admin: Optional ``(group_id, user_id) -> bool`` capability check

    Returns:
        Created Celebration with ``gift_leader`` and ``total_contributed`` set

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotAuthorizedError: If creator is not a group admin
        InvalidAmountError: If target_amount is not a positive amount
        InsufficientMembersError: If the group has fewer than 2 members
        CelebrantNotFoundError: If celebrant is not a group member
    """
    check_admin = is_admin or is_group_admin
    group = get_group(group_id=group_id)

    if not check_admin(group.id, created_by_id):
        raise NotAuthorizedError("Only group admins can create celebrations")

    if not is_group_member(group.id, celebrant_id):
        raise CelebrantNotFoundError("Celebrant must be a member of the group")

    if target_amount is not None:
        target_amount = to_amount(target_amount, field='Target amount')

    celebration = Celebration.objects.create(
        group=group,
        celebrant_id=celebrant_id,
        event_date=event_date,
        year=event_date.year,
        status=CelebrationStatus.UPCOMING,
        target_amount=target_amount,
    )

    record = assign_initial_leader(
        celebration_id=celebration.id,
        roster=roster_for_group(group_id=group.id),
    )
    celebration.gift_leader_id = record.leader_id
    # Same shape as the annotated read paths; a new celebration has no contributions
    celebration.total_contributed = ZERO

    logger.info(
        "Celebration %s created in group %s for %s",
        celebration.id, group.id, celebrant_id,
    )
    return celebration


@transaction.atomic
def complete_celebration(
    *,
    celebration_id: UUID,
    actor_id: UUID,
    is_admin: Optional[Callable[[UUID, UUID], bool]] = None
) -> Celebration:
    """
    Move a celebration to its terminal ``completed`` status (admin only).

    Raises:
        CelebrationNotFoundError: If celebration doesn't exist
        NotAuthorizedError: If actor is not a group admin
        CelebrationClosedError: If already completed
    """
    check_admin = is_admin or is_group_admin
    try:
        celebration = Celebration.objects.select_for_update().get(id=celebration_id)
    except Celebration.DoesNotExist:
        raise CelebrationNotFoundError(f"Celebration with ID {celebration_id} not found")

    if not check_admin(celebration.group_id, actor_id):
        raise NotAuthorizedError("Only group admins can complete celebrations")

    if celebration.is_terminal:
        raise CelebrationClosedError("Celebration is already completed")

    celebration.status = CelebrationStatus.COMPLETED
    celebration.save(update_fields=['status', 'updated_at'])
    return celebration


def get_celebrations_for_user(*, user: User) -> QuerySet[Celebration]:
    """
    Get celebrations in the user's groups, upcoming first.

    Celebrations where the user is the celebrant are excluded so the
    celebrant never sees the coordination around their own gift.
    Each row is annotated with ``total_contributed``.
    """
    queryset = (
        Celebration.objects
        .filter(group__memberships__user=user)
        .exclude(celebrant=user)
        .select_related('group', 'celebrant', 'gift_leader')
        .order_by('event_date', 'created_at')
    )
    return _with_totals(queryset)


def get_celebration(*, celebration_id: UUID, user: User) -> Celebration:
    """
    Get a single celebration visible to the user.

    Raises:
        CelebrationNotFoundError: If it doesn't exist, the user is not a
            group member, or the user is the celebrant
    """
    try:
        celebration = _with_totals(
            Celebration.objects.select_related('group', 'celebrant', 'gift_leader')
        ).get(id=celebration_id)
    except Celebration.DoesNotExist:
        raise CelebrationNotFoundError(f"Celebration with ID {celebration_id} not found")

    if celebration.celebrant_id == user.id or not is_group_member(celebration.group_id, user.id):
        raise CelebrationNotFoundError(f"Celebration with ID {celebration_id} not found")

    return celebration
