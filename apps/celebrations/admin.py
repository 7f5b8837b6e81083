from django.contrib import admin
from apps.celebrations.models import Celebration, CelebrationContribution, GiftLeaderHistory


class GiftLeaderHistoryInline(admin.TabularInline):
    """Read-only Gift Leader history within a celebration."""
    model = GiftLeaderHistory
    extra = 0
    fields = ['assigned_to', 'assigned_by', 'reason', 'created_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """History is written by the leadership service only."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class CelebrationContributionInline(admin.TabularInline):
    """Inline admin for contributions."""
    model = CelebrationContribution
    extra = 0
    fields = ['user', 'amount', 'updated_at']
    readonly_fields = ['updated_at']


@admin.register(Celebration)
class CelebrationAdmin(admin.ModelAdmin):
    """Admin interface for Celebrations."""

    list_display = [
        'celebrant',
        'group',
        'event_date',
        'gift_leader',
        'status',
        'target_amount',
    ]
    list_filter = ['status', 'year']
    search_fields = ['celebrant__email', 'group__name']
    # Leader changes go through the service so history stays complete
    readonly_fields = ['gift_leader', 'created_at', 'updated_at']
    inlines = [GiftLeaderHistoryInline, CelebrationContributionInline]
    date_hierarchy = 'event_date'
    ordering = ['event_date']


@admin.register(GiftLeaderHistory)
class GiftLeaderHistoryAdmin(admin.ModelAdmin):
    """Audit view of Gift Leader assignments."""

    list_display = ['celebration', 'assigned_to', 'assigned_by', 'reason', 'created_at']
    list_filter = ['reason']
    readonly_fields = ['celebration', 'assigned_to', 'assigned_by', 'reason', 'created_at']
    ordering = ['-created_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
