"""
Split funding service - crowd-funded reservations of wishlist items.

Lifecycle of a split claim:

    unclaimed --open_split--> split_open --pledge*--> split_open | split_funded

The target (item price plus optional additional costs) is frozen on the
claim when the split is opened, so later price edits never move the goal
under existing pledges.

Every pledge write locks the claim row, recomputes the pledged total from
the pledge rows, validates against the target, upserts the actor's pledge
and flips the status in one transaction.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count, Sum

from apps.core.events import claim_changed, emit, pledge_changed
from apps.core.exceptions import (
    AlreadyFundedError,
    ClaimNotAllowedError,
    ExceedsRemainingError,
    SplitNotOpenError,
)
from apps.core.money import ZERO, round_cents, to_amount
from apps.core.retry import retry_on_conflict
from apps.wishlists.models import ClaimStatus, ClaimType, GiftClaim, SplitPledge, WishlistItem

from .claim_ledger import ensure_can_reserve, get_item, insert_claim
from .claim_projections import build_split_status

logger = logging.getLogger(__name__)


def _lock_split(item: WishlistItem) -> GiftClaim:
    """Lock and return the item's split claim."""
    gift_claim = (
        GiftClaim.objects
        .select_for_update()
        .select_related('item')
        .filter(item=item)
        .first()
    )
    if gift_claim is None or gift_claim.claim_type != ClaimType.SPLIT:
        raise SplitNotOpenError("This item has no open split")
    return gift_claim


def _pledged_by_others(gift_claim: GiftClaim, actor_id: UUID) -> Decimal:
    total = (
        SplitPledge.objects
        .filter(claim=gift_claim)
        .exclude(contributor_id=actor_id)
        .aggregate(total=Sum('amount'))['total']
    )
    return total or ZERO


def _record_pledge(gift_claim: GiftClaim, actor_id: UUID, amount: Decimal, others: Decimal) -> bool:
    """Upsert the actor's pledge; return True when the split became funded."""
    SplitPledge.objects.update_or_create(
        claim=gift_claim,
        contributor_id=actor_id,
        defaults={'amount': amount},
    )

    funded = others + amount == gift_claim.target_amount
    if funded:
        gift_claim.status = ClaimStatus.SPLIT_FUNDED
        gift_claim.save(update_fields=['status', 'updated_at'])

    emit(
        pledge_changed,
        sender=SplitPledge,
        item_id=gift_claim.item_id,
        claim_id=gift_claim.id,
        actor_id=actor_id,
        amount=amount,
        is_fully_funded=funded,
    )
    return funded


@retry_on_conflict
@transaction.atomic
def open_split(
    *,
    item_id: UUID,
    actor_id: UUID,
    additional_costs: Optional[Decimal] = None
) -> GiftClaim:
    """
    Open a split for an unclaimed item.

    The opener does not pledge implicitly.

    Args:
        item_id: UUID of the wishlist item
        actor_id: UUID of the member opening the split
        additional_costs: Optional shipping or wrapping on top of the price;
            zero is treated as omitted

    Returns:
        Created GiftClaim in ``split_open`` status with the frozen target

    Raises:
        InvalidAmountError: If additional_costs is negative or malformed
        ItemNotFoundError: If item doesn't exist
        ClaimNotAllowedError: If actor owns the item, or item has no price
        AlreadyClaimedError: If the item already has an active claim
    """
    if additional_costs is not None:
        additional_costs = to_amount(
            additional_costs,
            field='Additional costs',
            allow_zero=True,
        ) or None

    item = get_item(item_id)
    ensure_can_reserve(item, actor_id)

    if item.price is None:
        raise ClaimNotAllowedError("Only items with a price can be split")

    target = item.price + (additional_costs or ZERO)

    gift_claim = insert_claim(
        item=item,
        actor_id=actor_id,
        claim_type=ClaimType.SPLIT,
        status=ClaimStatus.SPLIT_OPEN,
        additional_costs=additional_costs,
        target_amount=target,
    )

    emit(
        claim_changed,
        sender=GiftClaim,
        item_id=item.id,
        claim_id=gift_claim.id,
        actor_id=actor_id,
        action='split_opened',
    )
    logger.info("Split opened on item %s by %s (target %s)", item.id, actor_id, target)
    return gift_claim


@retry_on_conflict
@transaction.atomic
def pledge(*, item_id: UUID, actor_id: UUID, amount: Decimal) -> dict:
    """
    Pledge toward an open split, replacing the actor's previous pledge.

    The actor's existing pledge is not counted against the remaining gap,
    so re-pledging can raise or lower a share freely up to the target.

    Args:
        item_id: UUID of the wishlist item
        actor_id: UUID of the contributing member
        amount: Pledge amount

    Returns:
        dict: Split status after the pledge (see ``get_split_status``)

    Raises:
        InvalidAmountError: If amount is not greater than 0
        ItemNotFoundError: If item doesn't exist
        ClaimNotAllowedError: If actor owns the item
        SplitNotOpenError: If the item has no split, or it is already funded
        ExceedsRemainingError: If the pledge would push the total over target
    """
    amount = to_amount(amount, field='Pledge amount')
    item = get_item(item_id)
    ensure_can_reserve(item, actor_id)

    gift_claim = _lock_split(item)
    if gift_claim.status != ClaimStatus.SPLIT_OPEN:
        raise SplitNotOpenError("This split is already fully funded")

    others = _pledged_by_others(gift_claim, actor_id)
    remaining = gift_claim.target_amount - others
    if amount > remaining:
        raise ExceedsRemainingError(
            f"Pledge exceeds the remaining amount of {remaining}",
            remaining=remaining,
        )

    funded = _record_pledge(gift_claim, actor_id, amount, others)
    logger.info(
        "Pledge of %s on item %s by %s%s",
        amount, item.id, actor_id, ' (funded)' if funded else '',
    )
    return build_split_status(gift_claim)


@retry_on_conflict
@transaction.atomic
def close_split(*, item_id: UUID, actor_id: UUID) -> dict:
    """
    Cover the remaining gap of a split with the actor's pledge.

    The actor's pledge becomes whatever makes the total exactly equal the
    target, and the split is marked funded.

    Returns:
        dict: Split status after closing (``is_fully_funded`` is True)

    Raises:
        ItemNotFoundError: If item doesn't exist
        ClaimNotAllowedError: If actor owns the item
        SplitNotOpenError: If the item has no split claim
        AlreadyFundedError: If the split is already funded
    """
    item = get_item(item_id)
    ensure_can_reserve(item, actor_id)

    gift_claim = _lock_split(item)
    if gift_claim.status == ClaimStatus.SPLIT_FUNDED:
        raise AlreadyFundedError("This split is already fully funded")

    others = _pledged_by_others(gift_claim, actor_id)
    amount = gift_claim.target_amount - others

    _record_pledge(gift_claim, actor_id, amount, others)
    logger.info("Split on item %s closed by %s with %s", item.id, actor_id, amount)
    return build_split_status(gift_claim)


def suggested_share(*, item_id: UUID) -> Decimal:
    """
    Suggest an equal share for the next contributor.

    ``target / (contributors + 1)`` rounded half-up to cents, never more
    than the remaining gap, and zero once the split is funded.

    Raises:
        SplitNotOpenError: If the item has no split claim
    """
    gift_claim = (
        GiftClaim.objects
        .filter(item_id=item_id, claim_type=ClaimType.SPLIT)
        .first()
    )
    if gift_claim is None:
        raise SplitNotOpenError("This item has no open split")

    if gift_claim.status == ClaimStatus.SPLIT_FUNDED:
        return ZERO

    totals = SplitPledge.objects.filter(claim=gift_claim).aggregate(
        total=Sum('amount'),
        contributors=Count('contributor', distinct=True),
    )
    remaining = max(ZERO, gift_claim.target_amount - (totals['total'] or ZERO))
    share = round_cents(gift_claim.target_amount / (totals['contributors'] + 1))
    return min(share, remaining)
