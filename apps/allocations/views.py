from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.models import User, Role
from apps.accounts.permissions import IsShopkeeperOrAdmin, can_access_shop
from apps.accounts.serializers import CustomerSerializer
from apps.core.periods import current_period

from .serializers import (
    MonthlyAllocationSerializer,
    AllocationHistoryPeriodSerializer,
    QuotaChangeLogSerializer,
    PeriodFilterSerializer,
    DistributeQuotaInputSerializer,
)
from .services import (
    get_allocations,
    ensure_allocations,
    get_allocation_history,
    distribute,
    get_quota_history,
    # Exceptions
    AllocationStorageError,
    InvalidQuantityError,
    QuotaExceededError,
    AllocationNotFoundError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class DistributeResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    allocation = MonthlyAllocationSerializer()


def _storage_error_response(message='Failed to load allocations'):
    return Response({'error': message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


# =============================================================================
# Cardholder endpoints
# =============================================================================

@extend_schema(
    responses={200: MonthlyAllocationSerializer(many=True), 500: ErrorResponseSerializer},
    description="Current month's allocations for the caller. Created on first access.",
    tags=['allocations'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_allocations(request):
    """Ensure and return the caller's allocations for this month."""
    month, year = current_period()
    try:
        allocations = ensure_allocations(user_id=request.user.id, month=month, year=year)
    except AllocationStorageError:
        return _storage_error_response()

    return Response(MonthlyAllocationSerializer(allocations, many=True).data)


@extend_schema(
    parameters=[
        OpenApiParameter('month', int, description='Month 1-12, defaults to current'),
        OpenApiParameter('year', int, description='Year, defaults to current'),
    ],
    responses={200: MonthlyAllocationSerializer(many=True), 500: ErrorResponseSerializer},
    description="The caller's allocations for a period. Rows are never created here.",
    tags=['allocations'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def period_allocations(request):
    """Return the caller's allocations for a given month."""
    filter_serializer = PeriodFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)
    params = filter_serializer.validated_data

    period = current_period()
    try:
        allocations = get_allocations(
            user_id=request.user.id,
            month=params.get('month', period.month),
            year=params.get('year', period.year),
        )
    except AllocationStorageError:
        return _storage_error_response()

    return Response(MonthlyAllocationSerializer(allocations, many=True).data)


@extend_schema(
    responses={200: AllocationHistoryPeriodSerializer(many=True), 403: ErrorResponseSerializer},
    description="Last six allocation rows grouped by period. Own history, or any user for admins.",
    tags=['allocations'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def allocation_history(request, user_id):
    if request.user.id != user_id and request.user.role != Role.ADMIN:
        return Response({'error': 'Forbidden'}, status=status.HTTP_403_FORBIDDEN)

    history = get_allocation_history(user_id=user_id)
    return Response(AllocationHistoryPeriodSerializer(history, many=True).data)


# =============================================================================
# Shopkeeper endpoints
# =============================================================================

@extend_schema(
    responses={200: CustomerSerializer(many=True), 403: ErrorResponseSerializer},
    description="Cardholders registered at a shop, ordered by name.",
    tags=['shopkeeper'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsShopkeeperOrAdmin])
def shop_customers(request, shop_id):
    """List cardholders of a shop. Shopkeepers only see their own shop."""
    if not can_access_shop(request.user, shop_id):
        return Response(
            {'error': 'You can only view customers of your own shop'},
            status=status.HTTP_403_FORBIDDEN
        )

    customers = (
        User.objects
        .filter(role=Role.CARDHOLDER, shop_id=shop_id)
        .order_by('name', 'id')
    )
    return Response(CustomerSerializer(customers, many=True).data)


@extend_schema(
    methods=['GET'],
    responses={200: MonthlyAllocationSerializer(many=True), 500: ErrorResponseSerializer},
    description="A customer's current month quota. Created on first access.",
    tags=['shopkeeper'],
)
@extend_schema(
    methods=['PATCH'],
    request=DistributeQuotaInputSerializer,
    responses={
        200: DistributeResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Record a distribution: set the collected quantity of one item.",
    tags=['shopkeeper'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated, IsShopkeeperOrAdmin])
def customer_quota(request, user_id):
    month, year = current_period()

    if request.method == 'GET':
        try:
            allocations = ensure_allocations(user_id=user_id, month=month, year=year)
        except AllocationStorageError:
            return _storage_error_response()
        return Response(MonthlyAllocationSerializer(allocations, many=True).data)

    serializer = DistributeQuotaInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        allocation = distribute(
            user_id=user_id,
            item_code=data['item_code'],
            new_collected_quantity=data['new_quantity'],
            actor=request.user,
            month=month,
            year=year,
            reason=data.get('reason') or None,
        )
    except (InvalidQuantityError, QuotaExceededError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except AllocationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'message': 'Quota updated successfully',
        'allocation': MonthlyAllocationSerializer(allocation).data,
    })


@extend_schema(
    responses={200: QuotaChangeLogSerializer(many=True)},
    description="Last 20 distribution events for a customer, newest first.",
    tags=['shopkeeper'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsShopkeeperOrAdmin])
def quota_history(request, user_id):
    logs = get_quota_history(user_id=user_id, limit=20)
    return Response(QuotaChangeLogSerializer(logs, many=True).data)
