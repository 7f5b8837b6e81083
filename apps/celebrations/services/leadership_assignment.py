"""
Gift Leader assignment service.

The current leader is the ``Celebration.gift_leader`` pointer. Every change
to it is appended to ``GiftLeaderHistory`` for audit display; the history
is never read to decide who leads.

The pointer update is the primary mutation. The history append runs in its
own savepoint afterwards: if it fails the pointer change still stands and
the failure is logged.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from uuid import UUID

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.celebrations.models import AssignmentReason, Celebration, GiftLeaderHistory
from apps.core.events import emit, leadership_changed
from apps.core.exceptions import (
    CelebrationClosedError,
    CelebrationNotFoundError,
    InvalidTargetError,
    NotAuthorizedError,
    RotationError,
)
from apps.groups.services import is_group_admin, is_group_member

from .rotation_planning import RosterMember, plan_next_leader, roster_for_group

logger = logging.getLogger(__name__)

AdminCheck = Callable[[UUID, UUID], bool]


@dataclass(frozen=True)
class LeadershipRecord:
    """Outcome of a leadership change."""

    celebration_id: UUID
    leader_id: Optional[UUID]
    reason: str
    assigned_by: Optional[UUID] = None


def _lock_celebration(celebration_id: UUID) -> Celebration:
    try:
        return Celebration.objects.select_for_update().get(id=celebration_id)
    except Celebration.DoesNotExist:
        raise CelebrationNotFoundError(f"Celebration with ID {celebration_id} not found")


def _set_leader(celebration: Celebration, leader_id: Optional[UUID]) -> None:
    celebration.gift_leader_id = leader_id
    celebration.updated_at = timezone.now()
    celebration.save(update_fields=['gift_leader', 'updated_at'])


def _append_history(
    *,
    celebration: Celebration,
    leader_id: Optional[UUID],
    reason: str,
    assigned_by_id: Optional[UUID] = None
) -> None:
    """Best-effort audit append; never undoes the pointer change."""
    try:
        with transaction.atomic():
            GiftLeaderHistory.objects.create(
                celebration=celebration,
                assigned_to_id=leader_id,
                assigned_by_id=assigned_by_id,
                reason=reason,
            )
    except DatabaseError:
        logger.exception(
            "Failed to record Gift Leader history for celebration %s", celebration.id
        )


def _record_change(
    celebration: Celebration,
    leader_id: Optional[UUID],
    reason: str,
    assigned_by_id: Optional[UUID] = None
) -> LeadershipRecord:
    _set_leader(celebration, leader_id)
    _append_history(
        celebration=celebration,
        leader_id=leader_id,
        reason=reason,
        assigned_by_id=assigned_by_id,
    )
    emit(
        leadership_changed,
        sender=Celebration,
        celebration_id=celebration.id,
        leader_id=leader_id,
        assigned_by=assigned_by_id,
        reason=reason,
    )
    logger.info(
        "Gift Leader for celebration %s set to %s (%s)",
        celebration.id, leader_id, reason,
    )
    return LeadershipRecord(
        celebration_id=celebration.id,
        leader_id=leader_id,
        reason=reason,
        assigned_by=assigned_by_id,
    )


@transaction.atomic
def assign_initial_leader(
    *,
    celebration_id: UUID,
    roster: Iterable[RosterMember]
) -> LeadershipRecord:
    """
    Pick and store the first Gift Leader of a celebration.

    Args:
        celebration_id: UUID of the celebration
        roster: Group roster including the celebrant

    Returns:
        LeadershipRecord tagged ``auto_rotation`` with no actor

    Raises:
        CelebrationNotFoundError: If celebration doesn't exist
        InsufficientMembersError: If roster has fewer than 2 members
        CelebrantNotFoundError: If celebrant is missing from roster
    """
    celebration = _lock_celebration(celebration_id)
    leader_id = plan_next_leader(roster, celebration.celebrant_id)
    return _record_change(celebration, leader_id, AssignmentReason.AUTO_ROTATION)


@transaction.atomic
def reassign_leader(
    *,
    celebration_id: UUID,
    new_leader_id: UUID,
    actor_id: UUID,
    is_admin: Optional[AdminCheck] = None
) -> LeadershipRecord:
    """
    Manually hand the Gift Leader role to another member (admin only).

    Args:
        celebration_id: UUID of the celebration
        new_leader_id: UUID of the member taking over
        actor_id: UUID of the user performing the change
        is_admin: ``(group_id, user_id) -> bool`` capability check;
            defaults to the groups app role lookup

    Returns:
        LeadershipRecord tagged ``manual_reassign`` with the actor recorded

    Raises:
        CelebrationNotFoundError: If celebration doesn't exist
        NotAuthorizedError: If actor is not a group admin
        CelebrationClosedError: If celebration is completed
        InvalidTargetError: If new leader is the celebrant or not a member
    """
    check_admin = is_admin or is_group_admin
    celebration = _lock_celebration(celebration_id)

    if not check_admin(celebration.group_id, actor_id):
        raise NotAuthorizedError("Only group admins can reassign Gift Leaders")

    if celebration.is_terminal:
        raise CelebrationClosedError("Cannot change the Gift Leader of a completed celebration")

    if str(new_leader_id) == str(celebration.celebrant_id):
        raise InvalidTargetError("Cannot assign celebrant as Gift Leader")

    if not is_group_member(celebration.group_id, new_leader_id):
        raise InvalidTargetError("New Gift Leader must be a group member")

    return _record_change(
        celebration,
        new_leader_id,
        AssignmentReason.MANUAL_REASSIGN,
        assigned_by_id=actor_id,
    )


@transaction.atomic
def handle_member_departure(
    *,
    celebration_id: UUID,
    departed_user_id: UUID
) -> Optional[LeadershipRecord]:
    """
    Re-rotate leadership when the current Gift Leader leaves the group.

    The departed member is left out of the roster and the rotation is run
    again from the celebrant. If the remaining roster cannot produce a
    leader, the pointer is cleared.

    Returns:
        LeadershipRecord tagged ``member_left``, or None when the departed
        member was not leading an open celebration
    """
    celebration = _lock_celebration(celebration_id)

    if celebration.is_terminal or str(celebration.gift_leader_id) != str(departed_user_id):
        return None

    roster = roster_for_group(group_id=celebration.group_id, exclude=[departed_user_id])
    try:
        leader_id = plan_next_leader(roster, celebration.celebrant_id)
    except RotationError as e:
        logger.warning(
            "No Gift Leader available for celebration %s after departure: %s",
            celebration.id, e,
        )
        leader_id = None

    return _record_change(celebration, leader_id, AssignmentReason.MEMBER_LEFT)


def get_leader_history(*, celebration_id: UUID) -> QuerySet[GiftLeaderHistory]:
    """
    Get the assignment history of a celebration, newest first.

    Raises:
        CelebrationNotFoundError: If celebration doesn't exist
    """
    if not Celebration.objects.filter(id=celebration_id).exists():
        raise CelebrationNotFoundError(f"Celebration with ID {celebration_id} not found")

    return (
        GiftLeaderHistory.objects
        .filter(celebration_id=celebration_id)
        .select_related('assigned_to', 'assigned_by')
        .order_by('-created_at')
    )
