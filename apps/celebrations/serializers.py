from rest_framework import serializers
from apps.accounts.serializers import UserPublicSerializer
from .models import Celebration, CelebrationContribution, GiftLeaderHistory


class CelebrationSerializer(serializers.ModelSerializer):
    """Celebration with its current Gift Leader and contribution total."""

    celebrant = UserPublicSerializer(read_only=True)
    gift_leader = UserPublicSerializer(read_only=True)
    group_name = serializers.CharField(source='group.name', read_only=True)
    total_contributed = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        read_only=True,
        allow_null=True,
    )

    class Meta:
        model = Celebration
        fields = [
            'id',
            'group',
            'group_name',
            'celebrant',
            'gift_leader',
            'event_date',
            'year',
            'status',
            'target_amount',
            'total_contributed',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CelebrationCreateSerializer(serializers.Serializer):
    """Input for creating a celebration."""

    group_id = serializers.UUIDField()
    celebrant_id = serializers.UUIDField()
    event_date = serializers.DateField()
    target_amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        required=False,
        allow_null=True,
    )


class GiftLeaderHistorySerializer(serializers.ModelSerializer):
    """Audit entry of a Gift Leader change."""

    assigned_to = UserPublicSerializer(read_only=True)
    assigned_by = UserPublicSerializer(read_only=True)

    class Meta:
        model = GiftLeaderHistory
        fields = ['id', 'assigned_to', 'assigned_by', 'reason', 'created_at']
        read_only_fields = fields


class ReassignLeaderSerializer(serializers.Serializer):
    """Input for manual Gift Leader reassignment."""

    new_leader_id = serializers.UUIDField()


class LeadershipRecordSerializer(serializers.Serializer):
    celebration_id = serializers.UUIDField()
    leader_id = serializers.UUIDField(allow_null=True)
    reason = serializers.CharField()
    assigned_by = serializers.UUIDField(allow_null=True)


class ContributionSerializer(serializers.ModelSerializer):
    """A member's contribution to a celebration."""

    user = UserPublicSerializer(read_only=True)

    class Meta:
        model = CelebrationContribution
        fields = ['id', 'user', 'amount', 'created_at', 'updated_at']
        read_only_fields = fields


class ContributeSerializer(serializers.Serializer):
    """Input for adding or updating a contribution."""

    amount = serializers.DecimalField(max_digits=10, decimal_places=2)


class ContributionTotalSerializer(serializers.Serializer):
    celebration_id = serializers.UUIDField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    contributor_count = serializers.IntegerField()
    target_amount = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    progress = serializers.DecimalField(max_digits=5, decimal_places=4, allow_null=True)
    is_complete = serializers.BooleanField()


class ContributionListSerializer(serializers.Serializer):
    contributions = ContributionSerializer(many=True)
    totals = ContributionTotalSerializer()


class BudgetStatusSerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    approach = serializers.CharField()
    budget_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    spent = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage = serializers.IntegerField()
    threshold_level = serializers.CharField()
    period_start = serializers.DateField(allow_null=True)
    period_end = serializers.DateField(allow_null=True)
    currency = serializers.CharField()
