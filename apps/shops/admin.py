from django.contrib import admin
from apps.shops.models import Shop


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    """Admin interface for shops (shop CRUD lives here, not in the API)."""

    list_display = ['id', 'name', 'district', 'cardholder_count', 'created_at']
    list_filter = ['district']
    search_fields = ['id', 'name', 'district', 'address']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['name']

    def cardholder_count(self, obj):
        """Show number of cardholders attached to the shop."""
        return obj.users.filter(role='cardholder').count()
    cardholder_count.short_description = 'Cardholders'
