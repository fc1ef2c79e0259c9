from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.allocations.serializers import (
    MonthlyAllocationSerializer,
    EligibleOverrideInputSerializer,
)
from apps.allocations.services import (
    get_allocations,
    set_eligible_allocations,
    AllocationUserNotFoundError,
    AllocationOverrideError,
    AllocationStorageError,
    InvalidQuantityError,
)
from apps.core.periods import current_period

from .permissions import IsAdmin
from .serializers import (
    UserSerializer,
    UserDetailSerializer,
    UserStatsSerializer,
    RequestCodeSerializer,
    VerifyCodeSerializer,
    UserFilterSerializer,
    UserProfileUpdateSerializer,
    FlagUserSerializer,
    UserActiveSerializer,
)
from .services import (
    request_login_code,
    verify_login_code,
    list_users,
    get_user,
    update_user_profile,
    set_user_flag,
    set_user_active,
    get_user_stats_by_shop,
    # Exceptions
    CodeDeliveryError,
    InvalidCodeError,
    InactiveAccountError,
    RoleMismatchError,
    UserNotFoundError,
    UserUpdateError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


# =============================================================================
# OTP login
# =============================================================================

@extend_schema(
    request=RequestCodeSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
        500: ErrorResponseSerializer,
    },
    description="Email a one-time login code.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def request_code(request):
    serializer = RequestCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        request_login_code(**serializer.validated_data)
    except CodeDeliveryError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'message': 'Verification code sent to email'})


@extend_schema(
    request=VerifyCodeSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Verify a login code and receive JWT tokens. Creates the account on first login.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def verify_code(request):
    serializer = VerifyCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user, tokens, created = verify_login_code(**serializer.validated_data)
    except InvalidCodeError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except (InactiveAccountError, RoleMismatchError) as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Account created' if created else 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': tokens,
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


# =============================================================================
# User administration
# =============================================================================

@extend_schema(
    parameters=[
        OpenApiParameter('role', str, description='cardholder, shopkeeper, admin or all'),
        OpenApiParameter('shopId', str, description='Shop ID or all'),
        OpenApiParameter('flagged', str, description='true or false'),
    ],
    responses={200: UserSerializer(many=True)},
    description="List users. Admins first, flagged users first within a role.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_list(request):
    filter_serializer = UserFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    users = list_users(**filter_serializer.validated_data)
    return Response(UserSerializer(users, many=True).data)


@extend_schema(
    responses={200: UserStatsSerializer(many=True)},
    description="User counts per shop.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_stats(request):
    return Response(UserStatsSerializer(get_user_stats_by_shop(), many=True).data)


@extend_schema(
    methods=['GET'],
    responses={200: UserDetailSerializer, 404: ErrorResponseSerializer},
    description="User details with current month allocations.",
    tags=['users'],
)
@extend_schema(
    methods=['PATCH'],
    request=UserProfileUpdateSerializer,
    responses={
        200: UserDetailSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Edit a user's profile.",
    tags=['users'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_detail(request, user_id):
    if request.method == 'PATCH':
        try:
            user = get_user(user_id=user_id)
        except UserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        serializer = UserProfileUpdateSerializer(
            data=request.data,
            context={'user': user}
        )
        serializer.is_valid(raise_exception=True)

        try:
            update_user_profile(user_id=user_id, **serializer.validated_data)
        except UserUpdateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = get_user(user_id=user_id)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    month, year = current_period()
    try:
        allocations = get_allocations(user_id=user.id, month=month, year=year)
    except AllocationStorageError:
        return Response(
            {'error': 'Failed to load allocations'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response(UserDetailSerializer(user, context={'allocations': allocations}).data)


@extend_schema(
    request=FlagUserSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Flag or unflag a user. Admins cannot be flagged.",
    tags=['users'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def flag_user(request, user_id):
    serializer = FlagUserSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        user = set_user_flag(
            user_id=user_id,
            is_flagged=data['is_flagged'],
            flagged_by=request.user,
            reason=data.get('flag_reason') or None,
        )
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except UserUpdateError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(UserSerializer(user).data)


@extend_schema(
    request=UserActiveSerializer,
    responses={200: UserSerializer, 404: ErrorResponseSerializer},
    description="Activate or deactivate a user.",
    tags=['users'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def set_active(request, user_id):
    serializer = UserActiveSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = set_user_active(user_id=user_id, is_active=serializer.validated_data['is_active'])
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(UserSerializer(user).data)


@extend_schema(
    request=EligibleOverrideInputSerializer,
    responses={
        200: MonthlyAllocationSerializer(many=True),
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Override eligible quantities of a cardholder for the current month.",
    tags=['users'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def override_allocations(request, user_id):
    serializer = EligibleOverrideInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    month, year = current_period()
    try:
        allocations = set_eligible_allocations(
            user_id=user_id,
            items=serializer.validated_data['allocations'],
            actor=request.user,
            month=month,
            year=year,
        )
    except AllocationUserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (AllocationOverrideError, InvalidQuantityError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(MonthlyAllocationSerializer(allocations, many=True).data)
