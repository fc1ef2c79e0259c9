from rest_framework import serializers

from apps.accounts.models import CardType

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):

    class Meta:
        model = Notification
        fields = [
            'id',
            'shop',
            'user',
            'type',
            'message',
            'is_sent',
            'created_at',
            'acknowledged_at',
        ]
        read_only_fields = fields


class BroadcastSlotSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    token_id = serializers.CharField()
    time_slot = serializers.CharField()
    date = serializers.CharField()
    queue_position = serializers.IntegerField()


class BroadcastResultSerializer(serializers.Serializer):
    created = serializers.IntegerField()
    recipients = serializers.IntegerField()
    card_type = serializers.CharField()
    start_at = serializers.DateTimeField()
    interval_minutes = serializers.IntegerField()
    slots = BroadcastSlotSerializer(many=True)


# =============================================================================
# Input serializers
# =============================================================================

class NotificationCreateSerializer(serializers.Serializer):
    """
    Body of a manual notification.

    Type and message emptiness is checked by the service so the error
    message matches other callers.
    """

    shopId = serializers.CharField(required=False, allow_null=True, allow_blank=True, source='shop_id', max_length=20)
    userId = serializers.IntegerField(required=False, allow_null=True, source='user_id')
    type = serializers.CharField(required=False, allow_blank=True, default='', max_length=50)
    message = serializers.CharField(required=False, allow_blank=True, default='')


class BroadcastInputSerializer(serializers.Serializer):
    cardType = serializers.ChoiceField(
        choices=CardType.choices,
        source='card_type',
        error_messages={'invalid_choice': 'Invalid or missing cardType'}
    )
    intervalMinutes = serializers.IntegerField(
        required=False, min_value=1, max_value=24 * 60, default=15, source='interval_minutes'
    )
    startAt = serializers.DateTimeField(
        required=False, allow_null=True, default=None, source='start_at',
        error_messages={'invalid': 'Invalid startAt timestamp'}
    )
    shopId = serializers.CharField(
        required=False, allow_null=True, default=None, source='shop_id', max_length=20,
        help_text='Admins only; shopkeepers always broadcast for their own shop'
    )
