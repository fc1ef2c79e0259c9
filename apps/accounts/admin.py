from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import User, Role, VerificationCode


class UserCreationAdminForm(forms.ModelForm):
    """Create users without a password; they log in with emailed codes."""

    class Meta:
        model = User
        fields = ('email', 'name', 'role', 'shop', 'card_type', 'family_size')

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_unusable_password()
        if commit:
            user.save()
        return user


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for cardholders, shopkeepers and administrators.

    Users are never deleted; deactivate or flag them instead.
    """

    list_display = [
        'email',
        'name',
        'role',
        'shop',
        'card_type',
        'is_active_badge',
        'is_flagged_badge',
        'last_login',
    ]

    list_filter = [
        'role',
        'card_type',
        'is_active',
        'is_flagged',
        'shop',
    ]

    search_fields = [
        'email',
        'name',
        'ration_card_number',
        'mobile_number',
    ]

    ordering = ['role', 'name']
    raw_id_fields = ['flagged_by']

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'name', 'role', 'language', 'shop')
        }),
        ('Ration Card', {
            'fields': ('ration_card_number', 'card_type', 'family_size'),
        }),
        ('Contact', {
            'fields': ('mobile_number', 'address', 'district', 'pincode'),
            'classes': ('collapse',),
        }),
        ('Status', {
            'fields': ('is_active', 'is_flagged', 'flag_reason', 'flagged_by', 'flagged_at'),
        }),
        ('Permissions', {
            'fields': ('is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'shop', 'card_type', 'family_size'),
        }),
    )

    add_form = UserCreationAdminForm
    readonly_fields = ['created_at', 'updated_at', 'last_login', 'flagged_at']

    filter_horizontal = ['groups', 'user_permissions']

    def is_active_badge(self, obj):
        """Display active status as colored badge."""
        if obj.is_active:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Active</span>'
            )
        return format_html(
            '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Inactive</span>'
        )
    is_active_badge.short_description = 'Status'
    is_active_badge.admin_order_field = 'is_active'

    def is_flagged_badge(self, obj):
        if obj.is_flagged:
            return format_html(
                '<span style="background: #E5A03A; color: #2C1810; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;" title="{}">Flagged</span>',
                obj.flag_reason or ''
            )
        return '-'
    is_flagged_badge.short_description = 'Flag'
    is_flagged_badge.admin_order_field = 'is_flagged'

    actions = [
        'activate_users',
        'deactivate_users',
        'unflag_users',
    ]

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (admins are skipped)."""
        safe_queryset = queryset.exclude(role=Role.ADMIN)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} admin(s).'
        self.message_user(request, msg)

    @admin.action(description='Clear flag on selected users')
    def unflag_users(self, request, queryset):
        count = 0
        for user in queryset.filter(is_flagged=True):
            user.unflag()
            count += 1
        self.message_user(request, f'Unflagged {count} user(s).')

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('shop')


@admin.register(VerificationCode)
class VerificationCodeAdmin(admin.ModelAdmin):
    """Codes are stored hashed; the admin only shows their state."""

    list_display = ['email', 'created_at', 'expires_at', 'attempts', 'verified_at']
    search_fields = ['email']
    list_filter = ['verified_at']
    exclude = ['code']
    readonly_fields = ['email', 'expires_at', 'attempts', 'verified_at', 'created_at']

    def has_add_permission(self, request):
        return False
