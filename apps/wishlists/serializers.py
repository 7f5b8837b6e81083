from rest_framework import serializers
from apps.accounts.serializers import UserPublicSerializer
from .models import GiftClaim


class GiftClaimSerializer(serializers.ModelSerializer):
    """Claim as seen by members other than the item owner."""

    claimed_by = UserPublicSerializer(read_only=True)

    class Meta:
        model = GiftClaim
        fields = [
            'id',
            'item',
            'claimed_by',
            'claim_type',
            'status',
            'additional_costs',
            'target_amount',
            'created_at',
        ]
        read_only_fields = fields


class OpenSplitSerializer(serializers.Serializer):
    """Input for opening a split."""

    additional_costs = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        required=False,
        allow_null=True,
    )


class PledgeSerializer(serializers.Serializer):
    """Input for pledging toward a split."""

    amount = serializers.DecimalField(max_digits=10, decimal_places=2)


class SplitContributorSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    display_name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)


class SplitStatusSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    claim_id = serializers.UUIDField()
    item_price = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    additional_costs = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    target = serializers.DecimalField(max_digits=10, decimal_places=2)
    total_pledged = serializers.DecimalField(max_digits=10, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=10, decimal_places=2)
    contributor_count = serializers.IntegerField()
    is_open = serializers.BooleanField()
    is_fully_funded = serializers.BooleanField()


class SplitDetailSerializer(serializers.Serializer):
    split = SplitStatusSerializer()
    contributors = SplitContributorSerializer(many=True)
    suggested_share = serializers.DecimalField(max_digits=10, decimal_places=2)


class OwnerItemStatusSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    is_claimed = serializers.BooleanField()


class ClaimSummarySerializer(serializers.Serializer):
    total_items = serializers.IntegerField()
    claimed = serializers.IntegerField()
    full_claimed = serializers.IntegerField()
    split_items = serializers.IntegerField()
    split_funded = serializers.IntegerField()


class ItemIdsQuerySerializer(serializers.Serializer):
    """``?items=<uuid>,<uuid>`` query parameter."""

    items = serializers.CharField()

    def validate_items(self, value):
        field = serializers.UUIDField()
        ids = []
        for raw in value.split(','):
            raw = raw.strip()
            if raw:
                ids.append(field.to_internal_value(raw))
        if not ids:
            raise serializers.ValidationError('At least one item id is required')
        return ids
