from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsAdmin

from .exceptions import ComplaintValidationError, ComplaintNotFoundError
from .serializers import (
    ComplaintSerializer,
    ComplaintCreateSerializer,
    ComplaintListFilterSerializer,
    ComplaintStatusInputSerializer,
)
from .services import (
    file_complaint,
    list_complaints,
    update_complaint_status,
)


# Response serializers for API documentation
class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    methods=['GET'],
    parameters=[OpenApiParameter('shopId', str, description="Admins only; defaults to the caller's shop")],
    responses={200: ComplaintSerializer(many=True)},
    description="Latest 100 complaints: a shop's for admins, the caller's own for everyone else.",
    tags=['complaints'],
)
@extend_schema(
    methods=['POST'],
    request=ComplaintCreateSerializer,
    responses={
        201: ComplaintSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="File a complaint against a shop.",
    tags=['complaints'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def complaints(request):
    if request.method == 'GET':
        filter_serializer = ComplaintListFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        rows = list_complaints(
            user=request.user,
            shop_id=filter_serializer.validated_data.get('shop_id') or None,
        )
        return Response(ComplaintSerializer(rows, many=True).data)

    serializer = ComplaintCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        complaint = file_complaint(
            user=request.user,
            shop_id=data.get('shop_id'),
            description=data.get('description'),
        )
    except ComplaintValidationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except ComplaintNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(ComplaintSerializer(complaint).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=ComplaintStatusInputSerializer,
    responses={
        200: ComplaintSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Change a complaint's status (admin only). Resolving stamps resolved_at.",
    tags=['complaints'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def complaint_status(request, complaint_id):
    serializer = ComplaintStatusInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        complaint = update_complaint_status(
            complaint_id=complaint_id,
            status=serializer.validated_data['status'],
        )
    except ComplaintValidationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except ComplaintNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(ComplaintSerializer(complaint).data)
