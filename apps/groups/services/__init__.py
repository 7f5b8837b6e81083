"""
Groups app services layer.

Group and membership storage is owned by the groups app; the gifting
apps only consume these read-only lookups.
"""

from .membership_lookup import (
    get_group,
    is_group_member,
    is_group_admin,
    member_group_ids,
)


__all__ = [
    'get_group',
    'is_group_member',
    'is_group_admin',
    'member_group_ids',
]
