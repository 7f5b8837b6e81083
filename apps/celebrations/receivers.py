"""
Reactions to changes owned by other apps.

When a member leaves a group (their GroupMembership row is deleted), every
open celebration in that group that they were leading gets a new Gift
Leader from the rotation.
"""

import logging

from django.db.models import QuerySet
from django.db.models.signals import post_delete
from django.dispatch import receiver

from apps.celebrations.models import Celebration, TERMINAL_STATUSES
from apps.groups.models import GroupMembership

from .services import handle_member_departure

logger = logging.getLogger(__name__)


def _is_membership_removal(origin) -> bool:
    """
    True when the delete started from the membership itself.

    Deleting a whole group or user cascades into memberships too; those
    celebrations are going away or lose the leader through SET_NULL.
    """
    if isinstance(origin, QuerySet):
        return origin.model is GroupMembership
    return isinstance(origin, GroupMembership)


@receiver(post_delete, sender=GroupMembership, dispatch_uid='celebrations.member_left_group')
def reassign_leadership_on_departure(sender, instance, origin=None, **kwargs):
    if not _is_membership_removal(origin):
        return

    led = (
        Celebration.objects
        .filter(group_id=instance.group_id, gift_leader_id=instance.user_id)
        .exclude(status__in=TERMINAL_STATUSES)
        .values_list('id', flat=True)
    )
    for celebration_id in list(led):
        handle_member_departure(
            celebration_id=celebration_id,
            departed_user_id=instance.user_id,
        )
        logger.info(
            "Leader %s left group %s; celebration %s re-rotated",
            instance.user_id, instance.group_id, celebration_id,
        )
