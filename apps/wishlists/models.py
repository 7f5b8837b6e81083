from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from decimal import Decimal
import uuid


class ItemType(models.TextChoices):
    STANDARD = 'standard', 'Standard'
    SURPRISE_ME = 'surprise_me', 'Surprise me'
    MYSTERY_BOX = 'mystery_box', 'Mystery box'


class ClaimType(models.TextChoices):
    FULL = 'full', 'Full'
    SPLIT = 'split', 'Split'


class ClaimStatus(models.TextChoices):
    FULL_CLAIMED = 'full_claimed', 'Claimed'
    SPLIT_OPEN = 'split_open', 'Split open'
    SPLIT_FUNDED = 'split_funded', 'Split funded'


class ItemState(models.TextChoices):
    """Claim state of an item; ``unclaimed`` means no GiftClaim row."""

    UNCLAIMED = 'unclaimed', 'Unclaimed'
    FULL_CLAIMED = 'full_claimed', 'Claimed'
    SPLIT_OPEN = 'split_open', 'Split open'
    SPLIT_FUNDED = 'split_funded', 'Split funded'


class WishlistItem(models.Model):
    """Something a member would like to receive."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='wishlist_items'
    )

    # Group the item is shared with (nullable for personal lists)
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='wishlist_items'
    )

    title = models.CharField(max_length=200)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    item_type = models.CharField(
        max_length=20,
        choices=ItemType.choices,
        default=ItemType.STANDARD
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'wishlist_items'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='wishlist_owner_created_idx'),
            models.Index(fields=['group'], name='wishlist_group_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def is_claimable(self):
        return self.item_type == ItemType.STANDARD


class GiftClaim(models.Model):
    """
    Active reservation of a wishlist item.

    At most one claim exists per item (the OneToOne link). A full claim is
    one member buying the item; a split claim is a crowd-funded reservation
    whose target is frozen when the split is opened.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.OneToOneField(
        WishlistItem,
        on_delete=models.CASCADE,
        related_name='claim'
    )
    # Claimant for full claims, opener for split claims
    claimed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='gift_claims'
    )

    claim_type = models.CharField(max_length=10, choices=ClaimType.choices)
    status = models.CharField(max_length=20, choices=ClaimStatus.choices)

    # Split funding (NULL for full claims)
    additional_costs = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    target_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'gift_claims'
        indexes = [
            models.Index(fields=['claimed_by', 'created_at'], name='claims_claimant_created_idx'),
            models.Index(fields=['status'], name='claims_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(claim_type=ClaimType.FULL, status=ClaimStatus.FULL_CLAIMED)
                    | Q(
                        claim_type=ClaimType.SPLIT,
                        status__in=[ClaimStatus.SPLIT_OPEN, ClaimStatus.SPLIT_FUNDED],
                        target_amount__isnull=False,
                    )
                ),
                name='gift_claim_type_matches_status',
            ),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.item_id} ({self.status})"

    @property
    def is_split(self):
        return self.claim_type == ClaimType.SPLIT

    @property
    def is_funded(self):
        return self.status == ClaimStatus.SPLIT_FUNDED


class SplitPledge(models.Model):
    """A contributor's share toward a split claim (one row per contributor)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    claim = models.ForeignKey(
        GiftClaim,
        on_delete=models.CASCADE,
        related_name='pledges'
    )
    contributor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='split_pledges'
    )
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'split_pledges'
        unique_together = [['claim', 'contributor']]
        indexes = [
            models.Index(fields=['contributor', 'created_at'], name='pledges_contributor_idx'),
        ]
        ordering = ['-amount', 'created_at']

    def __str__(self):
        return f"{self.contributor} pledges {self.amount} to {self.claim_id}"
