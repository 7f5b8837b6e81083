"""
Claim ledger service - exclusive reservation of wishlist items.

An item is unclaimed when it has no GiftClaim row. Creating a claim is a
single conditional insert guarded by the OneToOne claim -> item link, so
two members racing for the same item produce exactly one claim; the loser
gets AlreadyClaimedError rather than a generic database failure.
"""

import logging
from uuid import UUID

from django.db import IntegrityError, transaction

from apps.core.events import claim_changed, emit
from apps.core.exceptions import (
    AlreadyClaimedError,
    AlreadyFundedError,
    ClaimNotAllowedError,
    ClaimNotFoundError,
    ItemNotFoundError,
    NotClaimOwnerError,
)
from apps.core.retry import retry_on_conflict
from apps.groups.services import is_group_member
from apps.wishlists.models import ClaimStatus, ClaimType, GiftClaim, WishlistItem

logger = logging.getLogger(__name__)


def get_item(item_id: UUID) -> WishlistItem:
    """
    Fetch a wishlist item by id.

    Raises:
        ItemNotFoundError: If item doesn't exist
    """
    try:
        return WishlistItem.objects.get(id=item_id)
    except WishlistItem.DoesNotExist:
        raise ItemNotFoundError(f"Wishlist item with ID {item_id} not found")


def ensure_can_reserve(item: WishlistItem, actor_id: UUID) -> None:
    """
    Check that the actor may claim or fund the item.

    Raises:
        ClaimNotAllowedError: If actor owns the item, the item is not a
            standard item, or actor is not in the item's group
    """
    if str(item.owner_id) == str(actor_id):
        raise ClaimNotAllowedError("You cannot claim your own wishlist item")

    if not item.is_claimable:
        raise ClaimNotAllowedError("Only standard wishlist items can be claimed")

    if item.group_id and not is_group_member(item.group_id, actor_id):
        raise ClaimNotAllowedError("You must be a member of this item's group")


def insert_claim(*, item: WishlistItem, actor_id: UUID, **fields) -> GiftClaim:
    """
    Insert the claim row for an item, or fail if one already exists.

    The one-claim-per-item constraint decides; the insert runs in a
    savepoint so a failed insert leaves the caller's transaction usable.

    Raises:
        AlreadyClaimedError: If the item already has an active claim
    """
    try:
        with transaction.atomic():
            return GiftClaim.objects.create(item=item, claimed_by_id=actor_id, **fields)
    except IntegrityError:
        raise AlreadyClaimedError("This item has already been claimed")


@retry_on_conflict
@transaction.atomic
def claim(*, item_id: UUID, actor_id: UUID) -> GiftClaim:
    """
    Claim an item for the actor (full claim).

    Args:
        item_id: UUID of the wishlist item
        actor_id: UUID of the member claiming it

    Returns:
        Created GiftClaim in ``full_claimed`` status

    Raises:
        ItemNotFoundError: If item doesn't exist
        ClaimNotAllowedError: If actor owns the item or may not claim it
        AlreadyClaimedError: If the item already has an active claim
    """
    item = get_item(item_id)
    ensure_can_reserve(item, actor_id)

    gift_claim = insert_claim(
        item=item,
        actor_id=actor_id,
        claim_type=ClaimType.FULL,
        status=ClaimStatus.FULL_CLAIMED,
    )

    emit(
        claim_changed,
        sender=GiftClaim,
        item_id=item.id,
        claim_id=gift_claim.id,
        actor_id=actor_id,
        action='claimed',
    )
    logger.info("Item %s claimed by %s", item.id, actor_id)
    return gift_claim


@retry_on_conflict
@transaction.atomic
def unclaim(*, claim_id: UUID, actor_id: UUID) -> None:
    """
    Release a claim, returning the item to unclaimed.

    Split claims are released with their pledges. A funded split is final
    and cannot be released.

    Raises:
        ClaimNotFoundError: If claim doesn't exist
        NotClaimOwnerError: If actor is not the original claimant
        AlreadyFundedError: If the split has already been funded
    """
    try:
        gift_claim = GiftClaim.objects.select_for_update().get(id=claim_id)
    except GiftClaim.DoesNotExist:
        raise ClaimNotFoundError(f"Claim with ID {claim_id} not found")

    if str(gift_claim.claimed_by_id) != str(actor_id):
        raise NotClaimOwnerError("Only the member who claimed this item can release it")

    if gift_claim.is_funded:
        raise AlreadyFundedError("A funded split cannot be released")

    item_id = gift_claim.item_id
    # Pledges cascade with the claim
    gift_claim.delete()

    emit(
        claim_changed,
        sender=GiftClaim,
        item_id=item_id,
        claim_id=claim_id,
        actor_id=actor_id,
        action='unclaimed',
    )
    logger.info("Claim %s on item %s released by %s", claim_id, item_id, actor_id)
