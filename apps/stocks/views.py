from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsShopkeeperOrAdmin, IsAdmin, can_access_shop

from .serializers import (
    StockItemSerializer,
    StockAuditLogSerializer,
    StockFilterSerializer,
    StockDeltaInputSerializer,
    StockCorrectionInputSerializer,
    GovernmentAllocationInputSerializer,
    AuditFilterSerializer,
)
from .services import (
    list_stock,
    apply_stock_delta,
    correct_stock,
    allocate_government_stock,
    list_stock_audit,
    # Exceptions
    StockItemNotFoundError,
    InvalidStockQuantityError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class StockUpdateResponseSerializer(serializers.Serializer):
    item = StockItemSerializer()
    audit_recorded = serializers.BooleanField()


class AllocationResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    allocated = serializers.DecimalField(max_digits=12, decimal_places=2)
    current_stock = serializers.DecimalField(max_digits=12, decimal_places=2)
    audit_recorded = serializers.BooleanField()


def _resolve_shop(request, shop_id):
    """Shop from the request, falling back to the caller's own shop."""
    return shop_id or request.user.shop_id


def _shop_denied():
    return Response(
        {'error': 'You can only manage stock of your own shop'},
        status=status.HTTP_403_FORBIDDEN
    )


@extend_schema(
    parameters=[OpenApiParameter('shopId', str, description="Defaults to the caller's shop")],
    responses={200: StockItemSerializer(many=True), 400: ErrorResponseSerializer},
    description="Stock of a shop.",
    tags=['stocks'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_list(request):
    filter_serializer = StockFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    shop_id = _resolve_shop(request, filter_serializer.validated_data.get('shop_id'))
    if not shop_id:
        return Response({'error': 'Valid shopId is required'}, status=status.HTTP_400_BAD_REQUEST)

    return Response(StockItemSerializer(list_stock(shop_id=shop_id), many=True).data)


@extend_schema(
    request=StockDeltaInputSerializer,
    responses={
        200: StockUpdateResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Change on-hand stock by a delta. The result is never below zero.",
    tags=['stocks'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsShopkeeperOrAdmin])
def stock_delta(request):
    serializer = StockDeltaInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    shop_id = _resolve_shop(request, data.get('shop_id'))
    if not shop_id:
        return Response({'error': 'Valid shopId is required'}, status=status.HTTP_400_BAD_REQUEST)
    if not can_access_shop(request.user, shop_id):
        return _shop_denied()

    try:
        item, outcome = apply_stock_delta(
            shop_id=shop_id,
            item_code=data['item_code'],
            delta=data['delta'],
            actor=request.user,
        )
    except InvalidStockQuantityError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except StockItemNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'item': StockItemSerializer(item).data,
        'audit_recorded': outcome.recorded,
    })


@extend_schema(
    request=StockCorrectionInputSerializer,
    responses={
        200: StockUpdateResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Set on-hand stock of an item to an absolute quantity.",
    tags=['stocks'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsShopkeeperOrAdmin])
def stock_correction(request, item_code):
    serializer = StockCorrectionInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    shop_id = _resolve_shop(request, data.get('shop_id'))
    if not shop_id:
        return Response({'error': 'Valid shopId is required'}, status=status.HTTP_400_BAD_REQUEST)
    if not can_access_shop(request.user, shop_id):
        return _shop_denied()

    try:
        item, outcome = correct_stock(
            shop_id=shop_id,
            item_code=item_code,
            quantity=data['quantity'],
            actor=request.user,
            reason=data['reason'],
        )
    except InvalidStockQuantityError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except StockItemNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'item': StockItemSerializer(item).data,
        'audit_recorded': outcome.recorded,
    })


@extend_schema(
    request=GovernmentAllocationInputSerializer,
    responses={
        200: AllocationResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Set the government allocation of an item for a shop.",
    tags=['stocks'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def government_allocation(request):
    serializer = GovernmentAllocationInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        item, outcome = allocate_government_stock(actor=request.user, **serializer.validated_data)
    except InvalidStockQuantityError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except StockItemNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'message': 'Stock allocated successfully',
        'allocated': item.government_allocated,
        'current_stock': item.quantity,
        'audit_recorded': outcome.recorded,
    })


@extend_schema(
    parameters=[OpenApiParameter('limit', int, description='Rows to return (default 50)')],
    responses={200: StockAuditLogSerializer(many=True)},
    description="Stock audit trail of a shop, newest first.",
    tags=['stocks'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def stock_audit(request, shop_id):
    filter_serializer = AuditFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    logs = list_stock_audit(shop_id=shop_id, limit=filter_serializer.validated_data['limit'])
    return Response(StockAuditLogSerializer(logs, many=True).data)
