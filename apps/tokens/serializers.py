from rest_framework import serializers

from .models import Token, TokenStatus


class TokenSerializer(serializers.ModelSerializer):

    class Meta:
        model = Token
        fields = [
            'id',
            'shop',
            'user',
            'token_date',
            'time_slot',
            'queue_position',
            'status',
            'created_at',
        ]
        read_only_fields = fields


class ShopTokenSerializer(TokenSerializer):
    """Token row of a shop's queue, with who holds it."""

    email = serializers.EmailField(source='user.email', read_only=True)
    name = serializers.CharField(source='user.name', read_only=True)
    card_type = serializers.CharField(source='user.card_type', read_only=True, allow_null=True)

    class Meta(TokenSerializer.Meta):
        fields = TokenSerializer.Meta.fields + ['email', 'name', 'card_type']
        read_only_fields = fields


# =============================================================================
# Input serializers
# =============================================================================

class TokenListFilterSerializer(serializers.Serializer):
    shopId = serializers.CharField(required=False, source='shop_id', max_length=20)


class TokenStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TokenStatus.choices)
