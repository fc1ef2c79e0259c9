from django.contrib import admin

from .models import MonthlyAllocation, QuotaChangeLog


class QuotaChangeLogInline(admin.TabularInline):
    """Read-only distribution trail of an allocation."""
    model = QuotaChangeLog
    extra = 0
    fields = ['old_quantity', 'new_quantity', 'change_amount', 'changed_by', 'changed_by_role', 'reason', 'created_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(MonthlyAllocation)
class MonthlyAllocationAdmin(admin.ModelAdmin):
    list_display = [
        'user',
        'item_code',
        'month',
        'year',
        'eligible_quantity',
        'collected_quantity',
        'collection_date',
    ]
    list_filter = ['item_code', 'year', 'month']
    search_fields = ['user__email', 'user__name', 'user__ration_card_number']
    readonly_fields = ['collected_quantity', 'collection_date', 'last_modified_by', 'created_at', 'updated_at']
    raw_id_fields = ['user']
    inlines = [QuotaChangeLogInline]

    fieldsets = (
        ('Allocation', {
            'fields': ('user', 'item_code', 'month', 'year', 'eligible_quantity')
        }),
        ('Collection', {
            'fields': ('collected_quantity', 'collection_date')
        }),
        ('Audit', {
            'fields': ('last_modified_by', 'modification_reason', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(QuotaChangeLog)
class QuotaChangeLogAdmin(admin.ModelAdmin):
    """The change log is append-only; the admin only displays it."""

    list_display = ['user', 'item_code', 'month', 'year', 'old_quantity', 'new_quantity', 'change_amount', 'changed_by_role', 'created_at']
    list_filter = ['item_code', 'changed_by_role', 'created_at']
    search_fields = ['user__email', 'user__name', 'reason']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
