from rest_framework import serializers

from .models import Complaint


class ComplaintSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source='user.email', read_only=True)
    name = serializers.CharField(source='user.name', read_only=True)

    class Meta:
        model = Complaint
        fields = [
            'id',
            'user',
            'shop',
            'email',
            'name',
            'description',
            'status',
            'created_at',
            'updated_at',
            'resolved_at',
        ]
        read_only_fields = fields


# =============================================================================
# Input serializers
# =============================================================================

class ComplaintCreateSerializer(serializers.Serializer):
    """Emptiness is checked by the service so every caller gets the same message."""

    shopId = serializers.CharField(required=False, allow_null=True, allow_blank=True, source='shop_id', max_length=20)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ComplaintListFilterSerializer(serializers.Serializer):
    shopId = serializers.CharField(required=False, allow_blank=True, source='shop_id', max_length=20)


class ComplaintStatusInputSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_blank=True, default='', max_length=20)
