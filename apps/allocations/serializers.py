from decimal import Decimal

from rest_framework import serializers

from .models import MonthlyAllocation, QuotaChangeLog, ItemCode


class MonthlyAllocationSerializer(serializers.ModelSerializer):
    """Allocation with the remaining quantity for the period."""

    remaining_quantity = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = MonthlyAllocation
        fields = [
            'id',
            'user',
            'item_code',
            'month',
            'year',
            'eligible_quantity',
            'collected_quantity',
            'remaining_quantity',
            'collection_date',
            'modification_reason',
            'updated_at',
        ]
        read_only_fields = fields


class AllocationHistoryItemSerializer(serializers.ModelSerializer):

    class Meta:
        model = MonthlyAllocation
        fields = ['item_code', 'eligible_quantity', 'collected_quantity', 'collection_date']
        read_only_fields = fields


class AllocationHistoryPeriodSerializer(serializers.Serializer):
    period = serializers.CharField()
    month = serializers.IntegerField()
    year = serializers.IntegerField()
    items = AllocationHistoryItemSerializer(many=True)


class QuotaChangeLogSerializer(serializers.ModelSerializer):
    """Change-log row joined with the actor's display name."""

    changed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = QuotaChangeLog
        fields = [
            'id',
            'item_code',
            'month',
            'year',
            'old_quantity',
            'new_quantity',
            'change_amount',
            'changed_by',
            'changed_by_name',
            'changed_by_role',
            'reason',
            'created_at',
        ]
        read_only_fields = fields

    def get_changed_by_name(self, obj) -> str:
        return obj.changed_by.get_display_name()


# =============================================================================
# Input serializers
# =============================================================================

class PeriodFilterSerializer(serializers.Serializer):
    """Query parameters selecting a month; both default to the current period."""

    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    year = serializers.IntegerField(required=False, min_value=2000, max_value=9999)


class DistributeQuotaInputSerializer(serializers.Serializer):
    """
    Body of a distribution request.

    ``newQuantity`` is validated by the service so that a bad value maps
    to the same error as any other caller would get.
    """

    itemCode = serializers.ChoiceField(choices=ItemCode.choices, source='item_code')
    newQuantity = serializers.JSONField(source='new_quantity')
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class EligibleOverrideItemSerializer(serializers.Serializer):
    itemCode = serializers.ChoiceField(choices=ItemCode.choices, source='item_code')
    eligibleQuantity = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), source='eligible_quantity'
    )


class EligibleOverrideInputSerializer(serializers.Serializer):
    allocations = EligibleOverrideItemSerializer(many=True, allow_empty=False)
