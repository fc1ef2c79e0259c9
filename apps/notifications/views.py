from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.models import Role
from apps.accounts.permissions import IsShopkeeperOrAdmin
from apps.tokens.services import (
    broadcast_by_card_type,
    ShopRequiredError,
    InvalidBroadcastError,
)

from .exceptions import (
    NotificationValidationError,
    NotificationNotFoundError,
    NotificationTargetNotFoundError,
    NotificationAccessError,
)
from .serializers import (
    NotificationSerializer,
    NotificationCreateSerializer,
    BroadcastInputSerializer,
    BroadcastResultSerializer,
)
from .services import (
    list_notifications,
    create_notification,
    acknowledge_notification,
)


# Response serializers for API documentation
class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    methods=['GET'],
    parameters=[OpenApiParameter('limit', int, description='1-100, default 20')],
    responses={200: NotificationSerializer(many=True)},
    description="Notifications of the caller's shop plus global ones, newest first.",
    tags=['notifications'],
)
@extend_schema(
    methods=['POST'],
    request=NotificationCreateSerializer,
    responses={
        201: NotificationSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Create a notification. Shopkeepers can only target their own shop.",
    tags=['notifications'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def notifications(request):
    if request.method == 'GET':
        rows = list_notifications(
            shop_id=request.user.shop_id,
            limit=request.query_params.get('limit'),
        )
        return Response(NotificationSerializer(rows, many=True).data)

    permission = IsShopkeeperOrAdmin()
    if not permission.has_permission(request, None):
        return Response({'error': permission.message}, status=status.HTTP_403_FORBIDDEN)

    serializer = NotificationCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    shop_id = data.get('shop_id') or None
    if request.user.role == Role.SHOPKEEPER:
        if shop_id is None:
            shop_id = request.user.shop_id
        elif shop_id != request.user.shop_id:
            return Response(
                {'error': 'You can only notify your own shop'},
                status=status.HTTP_403_FORBIDDEN
            )

    try:
        notification = create_notification(
            shop_id=shop_id,
            user_id=data.get('user_id'),
            type=data['type'],
            message=data['message'],
        )
    except NotificationValidationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except NotificationTargetNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={
        200: NotificationSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Mark a notification of the caller's shop (or a global one) as acknowledged.",
    tags=['notifications'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def acknowledge(request, notification_id):
    try:
        notification = acknowledge_notification(
            notification_id=notification_id,
            actor=request.user,
        )
    except NotificationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotificationAccessError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(NotificationSerializer(notification).data)


@extend_schema(
    request=BroadcastInputSerializer,
    responses={200: BroadcastResultSerializer, 400: ErrorResponseSerializer},
    description=(
        "Create tokens in fixed-width slots for all active cardholders of a "
        "card type at the caller's shop and notify each of them."
    ),
    tags=['notifications'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsShopkeeperOrAdmin])
def broadcast_card_type(request):
    serializer = BroadcastInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    shop_id = request.user.shop_id
    if request.user.role == Role.ADMIN and data.get('shop_id'):
        shop_id = data['shop_id']

    try:
        result = broadcast_by_card_type(
            shop_id=shop_id,
            card_type=data['card_type'],
            interval_minutes=data['interval_minutes'],
            start_at=data['start_at'],
        )
    except ShopRequiredError:
        return Response(
            {'error': 'Missing shopId in user session'},
            status=status.HTTP_400_BAD_REQUEST
        )
    except InvalidBroadcastError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(BroadcastResultSerializer(result).data)
