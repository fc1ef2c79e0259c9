from django.contrib import admin

from .models import StockItem, StockAuditLog


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = ['shop', 'item_code', 'item_name', 'quantity', 'government_allocated', 'unit', 'updated_at']
    list_filter = ['shop', 'item_code']
    search_fields = ['item_code', 'item_name', 'shop__name']
    readonly_fields = ['allocated_by', 'last_restocked', 'created_at', 'updated_at']


@admin.register(StockAuditLog)
class StockAuditLogAdmin(admin.ModelAdmin):
    """Read-only view of the stock audit trail."""

    list_display = ['created_at', 'shop', 'item_code', 'change_type', 'old_quantity', 'new_quantity', 'quantity_difference', 'changed_by']
    list_filter = ['change_type', 'shop', 'item_code']
    search_fields = ['item_code', 'reason', 'changed_by__email']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
