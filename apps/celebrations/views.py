from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import GiftingServiceError, GroupNotFoundError
from apps.core.responses import ConflictResponseSerializer, ErrorResponseSerializer, error_response
from apps.groups.services import is_group_member

from .serializers import (
    BudgetStatusSerializer,
    CelebrationCreateSerializer,
    CelebrationSerializer,
    ContributeSerializer,
    ContributionListSerializer,
    ContributionSerializer,
    ContributionTotalSerializer,
    GiftLeaderHistorySerializer,
    LeadershipRecordSerializer,
    ReassignLeaderSerializer,
)
from .services import (
    add_or_update_contribution,
    complete_celebration,
    create_celebration,
    get_celebration,
    get_celebrations_for_user,
    get_contribution_total,
    get_contributions,
    get_group_budget_status,
    get_leader_history,
    reassign_leader,
    remove_contribution,
)


class CelebrationPagination(PageNumberPagination):
    """Custom pagination for celebrations."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CelebrationViewSet(viewsets.GenericViewSet):
    """
    Celebrations visible to the current user.

    The celebrant never sees their own celebration: it is missing from the
    list and every detail route answers 404 for them.

    list: Celebrations in the user's groups, upcoming first
    create: Create a celebration and rotate in its Gift Leader (admin)
    retrieve: Get a specific celebration
    """

    serializer_class = CelebrationSerializer
    lookup_value_regex = '[0-9a-fA-F-]{36}'
    permission_classes = [IsAuthenticated]
    pagination_class = CelebrationPagination

    def get_queryset(self):
        return get_celebrations_for_user(user=self.request.user)

    def list(self, request):
        """List celebrations in the user's groups."""
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = CelebrationSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        serializer = CelebrationSerializer(queryset, many=True)
        return Response(serializer.data)

    @extend_schema(
        request=CelebrationCreateSerializer,
        responses={201: CelebrationSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    )
    def create(self, request):
        """Create a celebration (group admins only)."""
        serializer = CelebrationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            celebration = create_celebration(
                group_id=serializer.validated_data['group_id'],
                celebrant_id=serializer.validated_data['celebrant_id'],
                event_date=serializer.validated_data['event_date'],
                created_by_id=request.user.id,
                target_amount=serializer.validated_data.get('target_amount'),
            )
        except GiftingServiceError as e:
            return error_response(e)

        return Response(CelebrationSerializer(celebration).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        """Get a celebration."""
        try:
            celebration = get_celebration(celebration_id=pk, user=request.user)
        except GiftingServiceError as e:
            return error_response(e)
        return Response(CelebrationSerializer(celebration).data)

    @extend_schema(responses={200: GiftLeaderHistorySerializer(many=True), 404: ErrorResponseSerializer})
    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        """Gift Leader history, newest first."""
        try:
            get_celebration(celebration_id=pk, user=request.user)
            entries = get_leader_history(celebration_id=pk)
        except GiftingServiceError as e:
            return error_response(e)
        return Response(GiftLeaderHistorySerializer(entries, many=True).data)

    @extend_schema(
        request=ReassignLeaderSerializer,
        responses={
            200: LeadershipRecordSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
    )
    @action(detail=True, methods=['post'])
    def reassign_leader(self, request, pk=None):
        """Hand the Gift Leader role to another member (admin only)."""
        serializer = ReassignLeaderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            get_celebration(celebration_id=pk, user=request.user)
            record = reassign_leader(
                celebration_id=pk,
                new_leader_id=serializer.validated_data['new_leader_id'],
                actor_id=request.user.id,
            )
        except GiftingServiceError as e:
            return error_response(e)

        return Response(LeadershipRecordSerializer(record).data)

    @extend_schema(request=None, responses={200: CelebrationSerializer, 403: ErrorResponseSerializer})
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Mark the celebration completed (admin only)."""
        try:
            get_celebration(celebration_id=pk, user=request.user)
            complete_celebration(celebration_id=pk, actor_id=request.user.id)
            celebration = get_celebration(celebration_id=pk, user=request.user)
        except GiftingServiceError as e:
            return error_response(e)
        return Response(CelebrationSerializer(celebration).data)

    @extend_schema(responses={200: ContributionListSerializer, 404: ErrorResponseSerializer})
    @action(detail=True, methods=['get'])
    def contributions(self, request, pk=None):
        """Contributions, largest first, with totals."""
        try:
            get_celebration(celebration_id=pk, user=request.user)
            totals = get_contribution_total(celebration_id=pk)
        except GiftingServiceError as e:
            return error_response(e)

        return Response({
            'contributions': ContributionSerializer(get_contributions(celebration_id=pk), many=True).data,
            'totals': ContributionTotalSerializer(totals).data,
        })

    @extend_schema(
        request=ContributeSerializer,
        responses={
            200: ContributionTotalSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ConflictResponseSerializer,
        },
    )
    @action(detail=True, methods=['post', 'delete'])
    def contribute(self, request, pk=None):
        """Set (POST) or withdraw (DELETE) the user's contribution."""
        if request.method == 'DELETE':
            try:
                get_celebration(celebration_id=pk, user=request.user)
                totals = remove_contribution(celebration_id=pk, actor_id=request.user.id)
            except GiftingServiceError as e:
                return error_response(e)
            return Response(ContributionTotalSerializer(totals).data)

        serializer = ContributeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            get_celebration(celebration_id=pk, user=request.user)
            totals = add_or_update_contribution(
                celebration_id=pk,
                actor_id=request.user.id,
                amount=serializer.validated_data['amount'],
            )
        except GiftingServiceError as e:
            return error_response(e)

        return Response(ContributionTotalSerializer(totals).data)


@extend_schema(
    responses={200: BudgetStatusSerializer, 204: None, 404: ErrorResponseSerializer},
    description="Budget status of a group for the current period (204 when no budget is set).",
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_budget(request, group_id):
    """Get a group's budget status."""
    if not is_group_member(group_id, request.user.id):
        return error_response(GroupNotFoundError(f"Group with ID {group_id} not found"))

    try:
        budget = get_group_budget_status(group_id=group_id)
    except GiftingServiceError as e:
        return error_response(e)

    if budget is None:
        return Response(status=status.HTTP_204_NO_CONTENT)
    return Response(BudgetStatusSerializer(budget).data)
