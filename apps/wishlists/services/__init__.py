"""Services for wishlist claims and split funding."""

from .claim_ledger import (
    get_item,
    claim,
    unclaim,
)
from .split_funding import (
    open_split,
    pledge,
    close_split,
    suggested_share,
)
from .claim_projections import (
    get_split_status,
    get_split_contributors,
    get_claim_summary,
    get_item_claim_status,
    get_claims_for_items,
    get_item_state,
    can_view_item,
    visible_item_ids,
)

__all__ = [
    # Claim Ledger
    'get_item',
    'claim',
    'unclaim',
    # Split Funding
    'open_split',
    'pledge',
    'close_split',
    'suggested_share',
    # Claim Projections
    'get_split_status',
    'get_split_contributors',
    'get_claim_summary',
    'get_item_claim_status',
    'get_claims_for_items',
    'get_item_state',
    'can_view_item',
    'visible_item_ids',
]
