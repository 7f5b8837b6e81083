from django.contrib import admin
from apps.wishlists.models import GiftClaim, SplitPledge, WishlistItem


@admin.register(WishlistItem)
class WishlistItemAdmin(admin.ModelAdmin):
    """Admin interface for Wishlist Items."""

    list_display = ['title', 'owner', 'group', 'price', 'item_type', 'created_at']
    list_filter = ['item_type']
    search_fields = ['title', 'owner__email']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']


class SplitPledgeInline(admin.TabularInline):
    """Inline admin for split pledges."""
    model = SplitPledge
    extra = 0
    fields = ['contributor', 'amount', 'updated_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """Pledges are validated against the target by the service."""
        return False


@admin.register(GiftClaim)
class GiftClaimAdmin(admin.ModelAdmin):
    """Admin interface for Gift Claims."""

    list_display = ['item', 'claimed_by', 'claim_type', 'status', 'target_amount', 'created_at']
    list_filter = ['claim_type', 'status']
    search_fields = ['item__title', 'claimed_by__email']
    readonly_fields = ['item', 'claim_type', 'status', 'target_amount', 'created_at', 'updated_at']
    inlines = [SplitPledgeInline]
    ordering = ['-created_at']
