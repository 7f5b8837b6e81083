from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import OpenApiParameter, extend_schema

from apps.core.exceptions import GiftingServiceError
from apps.core.responses import ConflictResponseSerializer, ErrorResponseSerializer, error_response

from .serializers import (
    ClaimSummarySerializer,
    GiftClaimSerializer,
    ItemIdsQuerySerializer,
    OpenSplitSerializer,
    OwnerItemStatusSerializer,
    PledgeSerializer,
    SplitDetailSerializer,
    SplitStatusSerializer,
)
from .services import (
    claim as claim_item,
    can_view_item,
    close_split as close_item_split,
    get_claim_summary,
    get_claims_for_items,
    get_item,
    get_item_claim_status,
    get_split_contributors,
    get_split_status,
    open_split as open_item_split,
    pledge as pledge_to_split,
    suggested_share,
    unclaim,
    visible_item_ids,
)

ITEMS_PARAMETER = OpenApiParameter(
    name='items',
    type=str,
    description='Comma-separated wishlist item ids',
    required=True,
)

CLAIM_ERRORS = {
    400: ErrorResponseSerializer,
    403: ErrorResponseSerializer,
    404: ErrorResponseSerializer,
    409: ConflictResponseSerializer,
}


class ItemClaimViewSet(viewsets.ViewSet):
    """
    Claim and split funding actions on wishlist items.

    The item owner is never told who claimed or funded their item; for
    their own items they only learn whether each one is taken.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def _item_ids(self, request):
        query = ItemIdsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return query.validated_data['items']

    @extend_schema(request=None, responses={201: GiftClaimSerializer, **CLAIM_ERRORS})
    @action(detail=True, methods=['post'])
    def claim(self, request, pk=None):
        """Claim the whole item."""
        try:
            gift_claim = claim_item(item_id=pk, actor_id=request.user.id)
        except GiftingServiceError as e:
            return error_response(e)
        return Response(GiftClaimSerializer(gift_claim).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=OpenSplitSerializer, responses={201: SplitStatusSerializer, **CLAIM_ERRORS})
    @action(detail=True, methods=['post'])
    def open_split(self, request, pk=None):
        """Open a split for the item."""
        serializer = OpenSplitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            open_item_split(
                item_id=pk,
                actor_id=request.user.id,
                additional_costs=serializer.validated_data.get('additional_costs'),
            )
        except GiftingServiceError as e:
            return error_response(e)

        split = get_split_status(item_id=pk)
        return Response(SplitStatusSerializer(split).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PledgeSerializer, responses={200: SplitStatusSerializer, **CLAIM_ERRORS})
    @action(detail=True, methods=['post'])
    def pledge(self, request, pk=None):
        """Pledge toward the item's split (replaces a previous pledge)."""
        serializer = PledgeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            split = pledge_to_split(
                item_id=pk,
                actor_id=request.user.id,
                amount=serializer.validated_data['amount'],
            )
        except GiftingServiceError as e:
            return error_response(e)

        return Response(SplitStatusSerializer(split).data)

    @extend_schema(request=None, responses={200: SplitStatusSerializer, **CLAIM_ERRORS})
    @action(detail=True, methods=['post'])
    def close_split(self, request, pk=None):
        """Cover the remaining amount and mark the split funded."""
        try:
            split = close_item_split(item_id=pk, actor_id=request.user.id)
        except GiftingServiceError as e:
            return error_response(e)
        return Response(SplitStatusSerializer(split).data)

    @extend_schema(responses={200: SplitDetailSerializer, 404: ErrorResponseSerializer})
    @action(detail=True, methods=['get'])
    def split_status(self, request, pk=None):
        """Split progress, contributors and a suggested share."""
        try:
            item = get_item(pk)
        except GiftingServiceError as e:
            return error_response(e)

        if item.owner_id == request.user.id:
            owner_view = get_item_claim_status(item_ids=[item.id], owner_id=request.user.id)
            return Response(OwnerItemStatusSerializer(owner_view[0]).data)

        if not can_view_item(item, request.user.id):
            return Response({'error': f'Wishlist item with ID {pk} not found'}, status=status.HTTP_404_NOT_FOUND)

        split = get_split_status(item_id=item.id)
        if split is None:
            return Response({'error': 'This item has no split'}, status=status.HTTP_404_NOT_FOUND)

        return Response(SplitDetailSerializer({
            'split': split,
            'contributors': get_split_contributors(item_id=item.id),
            'suggested_share': suggested_share(item_id=item.id),
        }).data)

    @extend_schema(parameters=[ITEMS_PARAMETER], responses={200: ClaimSummarySerializer})
    @action(detail=False, methods=['get'])
    def claim_summary(self, request):
        """Claim counts across items; own items and other groups' items are not counted."""
        item_ids = visible_item_ids(item_ids=self._item_ids(request), viewer_id=request.user.id)
        summary = get_claim_summary(item_ids=item_ids)
        return Response(ClaimSummarySerializer(summary).data)

    @extend_schema(parameters=[ITEMS_PARAMETER], responses={200: GiftClaimSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def claims(self, request):
        """Claims on the given items the user may see; own items are excluded."""
        claims = get_claims_for_items(item_ids=self._item_ids(request), viewer_id=request.user.id)
        return Response(GiftClaimSerializer(claims, many=True).data)

    @extend_schema(parameters=[ITEMS_PARAMETER], responses={200: OwnerItemStatusSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def my_status(self, request):
        """Whether each of the user's own items is taken (no claimant details)."""
        statuses = get_item_claim_status(item_ids=self._item_ids(request), owner_id=request.user.id)
        return Response(OwnerItemStatusSerializer(statuses, many=True).data)


class ClaimViewSet(viewsets.ViewSet):
    """Release of claims by their claimant."""

    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    @extend_schema(responses={204: None, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer, 409: ErrorResponseSerializer})
    def destroy(self, request, pk=None):
        """Release a claim (and a split's pledges)."""
        try:
            unclaim(claim_id=pk, actor_id=request.user.id)
        except GiftingServiceError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)
