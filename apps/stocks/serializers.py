from rest_framework import serializers

from .models import StockItem, StockAuditLog


class StockItemSerializer(serializers.ModelSerializer):

    class Meta:
        model = StockItem
        fields = [
            'id',
            'shop',
            'item_code',
            'item_name',
            'item_name_hindi',
            'quantity',
            'government_allocated',
            'unit',
            'last_restocked',
            'updated_at',
        ]
        read_only_fields = fields


class StockAuditLogSerializer(serializers.ModelSerializer):
    changed_by_name = serializers.SerializerMethodField()
    changed_by_email = serializers.EmailField(source='changed_by.email', read_only=True, default=None)

    class Meta:
        model = StockAuditLog
        fields = [
            'id',
            'shop',
            'item_code',
            'changed_by',
            'changed_by_name',
            'changed_by_email',
            'changed_by_role',
            'change_type',
            'old_quantity',
            'new_quantity',
            'quantity_difference',
            'reason',
            'notes',
            'created_at',
        ]
        read_only_fields = fields

    def get_changed_by_name(self, obj):
        return obj.changed_by.get_display_name() if obj.changed_by else None


# =============================================================================
# Input serializers
# =============================================================================

class StockFilterSerializer(serializers.Serializer):
    shopId = serializers.CharField(required=False, source='shop_id', max_length=20)


class StockDeltaInputSerializer(serializers.Serializer):
    itemCode = serializers.CharField(source='item_code', max_length=20)
    deltaQuantity = serializers.DecimalField(source='delta', max_digits=12, decimal_places=2)
    shopId = serializers.CharField(required=False, source='shop_id', max_length=20)


class StockCorrectionInputSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2)
    shopId = serializers.CharField(required=False, source='shop_id', max_length=20)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')


class GovernmentAllocationInputSerializer(serializers.Serializer):
    shopId = serializers.CharField(source='shop_id', max_length=20)
    itemCode = serializers.CharField(source='item_code', max_length=20)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')


class AuditFilterSerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=500, default=50)
