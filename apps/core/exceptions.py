"""
Domain exceptions shared by the celebrations and wishlists apps.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.

The hierarchy is grouped by category so callers can react to a whole
class of failure at once:

    InvalidInputError   -> 400 (bad amount, bad leader target)
    NotPermittedError   -> 403 (not admin, not claim owner, own item)
    ConflictError       -> 409 (lost a race, split already funded, ...)
    NotFoundError       -> 404 (missing celebration, item, claim, group)
    RotationError       -> 400 (roster cannot produce a leader)

ConflictError is the expected outcome of concurrent actors. Views show
"someone beat you to it" for it instead of a generic failure.
"""

from decimal import Decimal
from typing import Optional


class GiftingServiceError(Exception):
    """Base exception for all gifting service errors."""
    pass


# =============================================================================
# Categories
# =============================================================================

class InvalidInputError(GiftingServiceError):
    """Raised when an argument violates a business rule."""
    pass


class NotPermittedError(GiftingServiceError):
    """Raised when the actor may not perform the operation."""
    pass


class ConflictError(GiftingServiceError):
    """Raised when the ledger state does not allow the operation."""
    pass


class NotFoundError(GiftingServiceError):
    """Raised when a referenced record does not exist."""
    pass


class RotationError(GiftingServiceError):
    """Raised when the Gift Leader rotation cannot pick a leader."""
    pass


# =============================================================================
# Validation
# =============================================================================

class InvalidAmountError(InvalidInputError):
    """Raised when a money amount is not positive or not a valid amount."""
    pass


class InvalidTargetError(InvalidInputError):
    """Raised when a new Gift Leader is the celebrant or not a group member."""
    pass


# =============================================================================
# Authorization
# =============================================================================

class NotAuthorizedError(NotPermittedError):
    """Raised when the actor lacks admin or membership capability."""
    pass


class NotClaimOwnerError(NotPermittedError):
    """Raised when someone other than the claimant tries to release a claim."""
    pass


class ClaimNotAllowedError(NotPermittedError):
    """Raised when the actor may not claim or fund this item."""
    pass


# =============================================================================
# Conflicts
# =============================================================================

class AlreadyClaimedError(ConflictError):
    """Raised when the item already has an active claim."""
    pass


class ExceedsRemainingError(ConflictError):
    """Raised when a pledge would push the split above its target."""

    def __init__(self, message: str, remaining: Optional[Decimal] = None):
        super().__init__(message)
        self.remaining = remaining


class AlreadyFundedError(ConflictError):
    """Raised when the split has already reached its target."""
    pass


class SplitNotOpenError(ConflictError):
    """Raised when the item has no open split to pledge toward."""
    pass


class CelebrationClosedError(ConflictError):
    """Raised when a completed celebration is modified."""
    pass


# =============================================================================
# Not found
# =============================================================================

class CelebrationNotFoundError(NotFoundError):
    """Raised when a celebration does not exist or is hidden from the user."""
    pass


class ItemNotFoundError(NotFoundError):
    """Raised when a wishlist item does not exist."""
    pass


class ClaimNotFoundError(NotFoundError):
    """Raised when a claim does not exist."""
    pass


class ContributionNotFoundError(NotFoundError):
    """Raised when the user has no contribution to remove."""
    pass


class GroupNotFoundError(NotFoundError):
    """Raised when a group does not exist."""
    pass


# =============================================================================
# Rotation
# =============================================================================

class InsufficientMembersError(RotationError):
    """Raised when fewer than two members are eligible for rotation."""
    pass


class CelebrantNotFoundError(RotationError):
    """Raised when the celebrant is not part of the roster."""
    pass
