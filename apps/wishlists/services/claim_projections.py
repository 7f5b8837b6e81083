"""
Read-only projections over claims and pledges.

Everything here is recomputed from GiftClaim and SplitPledge rows on each
call; nothing is cached or stored as a running total.

Owner exclusion: functions that may be shown to the item owner never
reveal who claimed or funded the item. Group items are only visible to
members of their group.
"""

from typing import Iterable, List, Optional
from uuid import UUID

from django.db.models import Count, Q, QuerySet, Sum

from apps.core.exceptions import ItemNotFoundError
from apps.core.money import ZERO
from apps.groups.services import is_group_member, member_group_ids
from apps.wishlists.models import (
    ClaimStatus,
    ClaimType,
    GiftClaim,
    ItemState,
    SplitPledge,
    WishlistItem,
)


def _visible_to(viewer_id: UUID, prefix: str = '') -> Q:
    # Personal items are open to anyone; group items only to that group's members
    return (
        Q(**{f'{prefix}group__isnull': True})
        | Q(**{f'{prefix}group_id__in': member_group_ids(viewer_id)})
    )


def can_view_item(item: WishlistItem, viewer_id: UUID) -> bool:
    """Whether the viewer may see claim and pledge details of ``item``."""
    return not item.group_id or is_group_member(item.group_id, viewer_id)


def visible_item_ids(*, item_ids: Iterable[UUID], viewer_id: UUID) -> List[UUID]:
    """
    Filter ``item_ids`` down to items whose claims the viewer may see.

    The viewer's own items and items in groups they are not a member of
    are dropped.
    """
    return list(
        WishlistItem.objects
        .filter(_visible_to(viewer_id), id__in=list(item_ids))
        .exclude(owner_id=viewer_id)
        .values_list('id', flat=True)
    )


def _pledge_totals(claim: GiftClaim) -> dict:
    totals = SplitPledge.objects.filter(claim=claim).aggregate(
        total=Sum('amount'),
        contributors=Count('contributor', distinct=True),
    )
    return {
        'total': totals['total'] or ZERO,
        'contributors': totals['contributors'],
    }


def build_split_status(claim: GiftClaim) -> dict:
    """
    Build the split status of a split claim.

    Returns:
        dict containing:
            - item_id, claim_id (UUID)
            - item_price (Decimal | None)
            - additional_costs (Decimal | None)
            - target (Decimal): Frozen when the split was opened
            - total_pledged (Decimal)
            - remaining (Decimal): Never negative
            - contributor_count (int)
            - is_open (bool)
            - is_fully_funded (bool)
    """
    totals = _pledge_totals(claim)
    target = claim.target_amount
    remaining = max(ZERO, target - totals['total'])
    is_funded = claim.status == ClaimStatus.SPLIT_FUNDED

    return {
        'item_id': claim.item_id,
        'claim_id': claim.id,
        'item_price': claim.item.price,
        'additional_costs': claim.additional_costs,
        'target': target,
        'total_pledged': totals['total'],
        'remaining': remaining,
        'contributor_count': totals['contributors'],
        'is_open': claim.status == ClaimStatus.SPLIT_OPEN,
        'is_fully_funded': is_funded,
    }


def get_split_status(*, item_id: UUID) -> Optional[dict]:
    """Get split funding status for an item, or None if it has no split claim."""
    claim = (
        GiftClaim.objects
        .select_related('item')
        .filter(item_id=item_id, claim_type=ClaimType.SPLIT)
        .first()
    )
    if claim is None:
        return None
    return build_split_status(claim)


def get_split_contributors(*, item_id: UUID) -> List[dict]:
    """Get contributors to an item's split, largest pledge first."""
    pledges = (
        SplitPledge.objects
        .filter(claim__item_id=item_id)
        .select_related('contributor')
        .order_by('-amount', 'created_at')
    )
    return [
        {
            'user_id': pledge.contributor_id,
            'display_name': pledge.contributor.get_display_name(),
            'amount': pledge.amount,
        }
        for pledge in pledges
    ]


def get_claim_summary(*, item_ids: Iterable[UUID]) -> dict:
    """
    Summarize claim states across a set of items.

    Returns:
        dict containing:
            - total_items (int): Distinct items asked about
            - claimed (int): Items with any active claim
            - full_claimed (int)
            - split_items (int): Open or funded splits
            - split_funded (int)
    """
    ids = list({str(item_id) for item_id in item_ids})
    counts = dict(
        GiftClaim.objects
        .filter(item_id__in=ids)
        .order_by()
        .values('status')
        .annotate(count=Count('id'))
        .values_list('status', 'count')
    )

    full_claimed = counts.get(ClaimStatus.FULL_CLAIMED, 0)
    split_open = counts.get(ClaimStatus.SPLIT_OPEN, 0)
    split_funded = counts.get(ClaimStatus.SPLIT_FUNDED, 0)

    return {
        'total_items': len(ids),
        'claimed': full_claimed + split_open + split_funded,
        'full_claimed': full_claimed,
        'split_items': split_open + split_funded,
        'split_funded': split_funded,
    }


def get_item_claim_status(*, item_ids: Iterable[UUID], owner_id: UUID) -> List[dict]:
    """
    Owner-safe claim status: whether each of the owner's items is taken.

    Only items owned by ``owner_id`` are reported, and claimant identity
    is never included.
    """
    items = list(
        WishlistItem.objects
        .filter(id__in=list(item_ids), owner_id=owner_id)
        .order_by('created_at')
        .values_list('id', flat=True)
    )
    claimed = set(
        GiftClaim.objects
        .filter(item_id__in=items)
        .values_list('item_id', flat=True)
    )
    return [
        {'item_id': item_id, 'is_claimed': item_id in claimed}
        for item_id in items
    ]


def get_claims_for_items(*, item_ids: Iterable[UUID], viewer_id: UUID) -> QuerySet[GiftClaim]:
    """
    Claims on the given items that the viewer is allowed to see.

    Claims on the viewer's own items, and on items in groups the viewer
    does not belong to, are excluded.
    """
    return (
        GiftClaim.objects
        .filter(_visible_to(viewer_id, prefix='item__'), item_id__in=list(item_ids))
        .exclude(item__owner_id=viewer_id)
        .select_related('item', 'claimed_by')
    )


def get_item_state(*, item_id: UUID) -> str:
    """
    Current claim state of an item.

    Raises:
        ItemNotFoundError: If item doesn't exist
    """
    if not WishlistItem.objects.filter(id=item_id).exists():
        raise ItemNotFoundError(f"Wishlist item with ID {item_id} not found")

    status = (
        GiftClaim.objects
        .filter(item_id=item_id)
        .values_list('status', flat=True)
        .first()
    )
    if status is None:
        return ItemState.UNCLAIMED
    return ItemState(status)
