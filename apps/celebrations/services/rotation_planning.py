"""
Gift Leader rotation planner.

Pure functions: no database access except ``roster_for_group``, which only
builds the input list.

Algorithm:
    1. Sort members by (birthday month, birthday day); members without a
       birthday go after everyone with one
    2. Ties (same date, or both missing) are broken by member id
    3. Find the celebrant in that order
    4. The next member in circular order is the Gift Leader

With exactly two members the result is always "the other member",
whatever the birthday data says.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import UUID

from apps.core.exceptions import CelebrantNotFoundError, InsufficientMembersError
from apps.groups.models import GroupMembership


@dataclass(frozen=True)
class RosterMember:
    """A group member as seen by the rotation."""

    id: UUID
    birthday_month: Optional[int] = None
    birthday_day: Optional[int] = None

    @property
    def has_birthday(self) -> bool:
        return self.birthday_month is not None


def _rotation_key(member: RosterMember):
    if not member.has_birthday:
        return (1, 0, 0, str(member.id))
    # A month without a day sorts as the 1st of that month
    return (0, member.birthday_month, member.birthday_day or 1, str(member.id))


def _distinct(members: Iterable[RosterMember]) -> List[RosterMember]:
    seen = set()
    unique = []
    for member in members:
        key = str(member.id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(member)
    return unique


def sort_roster(members: Iterable[RosterMember]) -> List[RosterMember]:
    """Return members in rotation order (total and stable)."""
    return sorted(_distinct(members), key=_rotation_key)


def plan_next_leader(members: Iterable[RosterMember], celebrant_id: UUID) -> UUID:
    """
    Pick the Gift Leader for a celebrant.

    Args:
        members: Full group roster, celebrant included
        celebrant_id: Member being celebrated

    Returns:
        Id of the member who follows the celebrant in rotation order

    Raises:
        InsufficientMembersError: If fewer than 2 distinct members
        CelebrantNotFoundError: If celebrant is not in the roster
    """
    ordered = sort_roster(members)

    if len(ordered) < 2:
        raise InsufficientMembersError(
            "Group needs at least 2 members for Gift Leader assignment"
        )

    positions = [str(member.id) for member in ordered]
    try:
        index = positions.index(str(celebrant_id))
    except ValueError:
        raise CelebrantNotFoundError("Celebrant not found in group members")

    if len(ordered) == 2:
        return ordered[1 - index].id

    return ordered[(index + 1) % len(ordered)].id


def roster_for_group(*, group_id: UUID, exclude: Iterable[UUID] = ()) -> List[RosterMember]:
    """
    Build the rotation roster from current group memberships.

    Args:
        group_id: Group whose members form the roster
        exclude: Member ids to leave out (e.g. someone who just left)
    """
    excluded = {str(user_id) for user_id in exclude}
    memberships = (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
    )
    return [
        RosterMember(
            id=membership.user_id,
            birthday_month=membership.user.birthday_month,
            birthday_day=membership.user.birthday_day,
        )
        for membership in memberships
        if str(membership.user_id) not in excluded
    ]
