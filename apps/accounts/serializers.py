from django.conf import settings
from rest_framework import serializers

from apps.allocations.serializers import MonthlyAllocationSerializer
from apps.shops.models import Shop

from .models import User, Role, CardType


class UserSerializer(serializers.ModelSerializer):
    """User profile as returned to the user and to admins."""

    shop_name = serializers.CharField(source='shop.name', read_only=True, default=None)
    display_name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'display_name',
            'role',
            'language',
            'shop',
            'shop_name',
            'ration_card_number',
            'card_type',
            'family_size',
            'mobile_number',
            'address',
            'district',
            'pincode',
            'is_active',
            'is_flagged',
            'flag_reason',
            'flagged_at',
            'last_login',
            'created_at',
        ]
        read_only_fields = fields


class UserDetailSerializer(UserSerializer):
    """Admin view of a user, with who flagged them and current allocations."""

    flagged_by_name = serializers.SerializerMethodField()
    allocations = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['flagged_by', 'flagged_by_name', 'allocations', 'updated_at']
        read_only_fields = fields

    def get_flagged_by_name(self, obj):
        return obj.flagged_by.get_display_name() if obj.flagged_by else None

    def get_allocations(self, obj):
        allocations = self.context.get('allocations', [])
        return MonthlyAllocationSerializer(allocations, many=True).data


class CustomerSerializer(serializers.ModelSerializer):
    """Cardholder row of a shop's customer list."""

    class Meta:
        model = User
        fields = [
            'id',
            'name',
            'ration_card_number',
            'card_type',
            'family_size',
            'mobile_number',
            'address',
        ]
        read_only_fields = fields


class UserStatsSerializer(serializers.Serializer):
    shop_id = serializers.CharField(allow_null=True)
    shop_name = serializers.CharField(source='shop__name', allow_null=True)
    shopkeepers = serializers.IntegerField()
    cardholders = serializers.IntegerField()
    flagged_users = serializers.IntegerField()
    flagged_shopkeepers = serializers.IntegerField()


# =============================================================================
# Input serializers
# =============================================================================

class RequestCodeSerializer(serializers.Serializer):
    email = serializers.EmailField()
    role = serializers.ChoiceField(choices=Role.choices)


class VerifyCodeSerializer(serializers.Serializer):
    email = serializers.EmailField()
    code = serializers.RegexField(
        r'^\d+$',
        min_length=settings.OTP_CODE_LENGTH,
        max_length=settings.OTP_CODE_LENGTH,
        error_messages={'invalid': 'Code must be numeric'}
    )
    role = serializers.ChoiceField(choices=Role.choices)
    language = serializers.CharField(required=False, default='english', max_length=20)


class UserFilterSerializer(serializers.Serializer):
    """
    Query parameters of the admin user list.

    ``all`` is accepted for role and shopId and means no filter.
    """

    role = serializers.ChoiceField(
        choices=[*Role.choices, ('all', 'All')],
        required=False
    )
    shopId = serializers.CharField(required=False, source='shop_id', max_length=20)
    flagged = serializers.ChoiceField(choices=['true', 'false'], required=False)

    def validate_role(self, value):
        return None if value == 'all' else value

    def validate_shopId(self, value):
        return None if value == 'all' else value

    def validate_flagged(self, value):
        return value == 'true'


class UserProfileUpdateSerializer(serializers.Serializer):
    """Fields an admin may edit. Only the supplied ones are changed."""

    name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    mobile_number = serializers.CharField(required=False, allow_blank=True, max_length=15)
    address = serializers.CharField(required=False, allow_blank=True)
    district = serializers.CharField(required=False, allow_blank=True, max_length=100)
    pincode = serializers.CharField(required=False, allow_blank=True, max_length=10)
    language = serializers.CharField(required=False, max_length=20)
    ration_card_number = serializers.CharField(required=False, allow_null=True, max_length=32)
    card_type = serializers.ChoiceField(choices=CardType.choices, required=False, allow_null=True)
    family_size = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    shop = serializers.PrimaryKeyRelatedField(queryset=Shop.objects.all(), required=False, allow_null=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False)

    def validate_ration_card_number(self, value):
        if not value:
            return None
        user = self.context.get('user')
        taken = User.objects.filter(ration_card_number=value)
        if user is not None:
            taken = taken.exclude(id=user.id)
        if taken.exists():
            raise serializers.ValidationError('Ration card number already registered')
        return value


class FlagUserSerializer(serializers.Serializer):
    isFlagged = serializers.BooleanField(source='is_flagged')
    flagReason = serializers.CharField(source='flag_reason', required=False, allow_blank=True, max_length=255)


class UserActiveSerializer(serializers.Serializer):
    isActive = serializers.BooleanField(source='is_active')
