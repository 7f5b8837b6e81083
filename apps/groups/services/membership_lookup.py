"""
Membership lookup service.

Read-only role and membership checks that the gifting services consume.
They take plain ids so that callers can inject any other implementation
with the same signature (see ``reassign_leader(is_admin=...)``).
"""

from django.db.models import QuerySet
from uuid import UUID

from apps.core.exceptions import GroupNotFoundError
from apps.groups.models import Group, GroupMembership, GroupRole


def get_group(*, group_id: UUID) -> Group:
    """
    Fetch a group by id.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def is_group_member(group_id: UUID, user_id: UUID) -> bool:
    """Return True if the user belongs to the group in any role."""
    return GroupMembership.objects.filter(group_id=group_id, user_id=user_id).exists()


def is_group_admin(group_id: UUID, user_id: UUID) -> bool:
    """Return True if the user is the owner or an admin of the group."""
    return GroupMembership.objects.filter(
        group_id=group_id,
        user_id=user_id,
        role__in=[GroupRole.OWNER, GroupRole.ADMIN],
    ).exists()


def member_group_ids(user_id: UUID) -> QuerySet:
    """
    Ids of the groups the user belongs to.

    Returned as a lazy queryset so callers can use it as a subquery
    (``group_id__in=member_group_ids(user_id)``).
    """
    return GroupMembership.objects.filter(user_id=user_id).values('group_id')
