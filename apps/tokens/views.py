from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsShopkeeperOrAdmin, can_access_shop

from .serializers import (
    TokenSerializer,
    ShopTokenSerializer,
    TokenListFilterSerializer,
    TokenStatusInputSerializer,
)
from .services import (
    book_token,
    get_my_token,
    list_shop_tokens,
    update_token_status,
    # Exceptions
    ShopRequiredError,
    InvalidTokenStatusError,
    TokenNotFoundError,
    TokenAccessError,
    TokenStorageError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    methods=['GET'],
    parameters=[OpenApiParameter('shopId', str, description="Defaults to the caller's shop")],
    responses={200: ShopTokenSerializer(many=True), 403: ErrorResponseSerializer},
    description="Latest 100 tokens of a shop (shopkeepers and admins).",
    tags=['tokens'],
)
@extend_schema(
    methods=['POST'],
    request=None,
    responses={201: TokenSerializer, 400: ErrorResponseSerializer},
    description="Book a token for today at the caller's own shop.",
    tags=['tokens'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def tokens(request):
    if request.method == 'POST':
        try:
            token = book_token(shop_id=request.user.shop_id, user=request.user)
        except ShopRequiredError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except TokenStorageError as e:
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(TokenSerializer(token).data, status=status.HTTP_201_CREATED)

    permission = IsShopkeeperOrAdmin()
    if not permission.has_permission(request, None):
        return Response({'error': permission.message}, status=status.HTTP_403_FORBIDDEN)

    filter_serializer = TokenListFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    shop_id = filter_serializer.validated_data.get('shop_id') or request.user.shop_id
    if not shop_id:
        return Response({'error': 'Valid shopId is required'}, status=status.HTTP_400_BAD_REQUEST)
    if not can_access_shop(request.user, shop_id):
        return Response(
            {'error': 'You can only view tokens of your own shop'},
            status=status.HTTP_403_FORBIDDEN
        )

    return Response(ShopTokenSerializer(list_shop_tokens(shop_id=shop_id), many=True).data)


@extend_schema(
    responses={200: TokenSerializer},
    description="The caller's latest token for today, or null.",
    tags=['tokens'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_token(request):
    token = get_my_token(user=request.user)
    if token is None:
        return Response(None)
    return Response(TokenSerializer(token).data)


@extend_schema(
    request=TokenStatusInputSerializer,
    responses={
        200: TokenSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Change a token's status. Shopkeepers only reach their own shop's tokens.",
    tags=['tokens'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsShopkeeperOrAdmin])
def token_status(request, token_id):
    serializer = TokenStatusInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        token = update_token_status(
            token_id=token_id,
            status=serializer.validated_data['status'],
            actor=request.user,
        )
    except InvalidTokenStatusError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except TokenNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except TokenAccessError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(TokenSerializer(token).data)
