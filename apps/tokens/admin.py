from django.contrib import admin

from .models import Token, QueueCounter


@admin.register(Token)
class TokenAdmin(admin.ModelAdmin):
    list_display = ['id', 'shop', 'user', 'token_date', 'time_slot', 'queue_position', 'status']
    list_filter = ['status', 'shop', 'token_date']
    search_fields = ['id', 'user__email', 'user__name']
    date_hierarchy = 'token_date'
    raw_id_fields = ['user']
    readonly_fields = ['queue_position', 'created_at', 'updated_at']

    def has_add_permission(self, request):
        return False


@admin.register(QueueCounter)
class QueueCounterAdmin(admin.ModelAdmin):
    list_display = ['shop', 'date', 'last_position']
    list_filter = ['shop']
    readonly_fields = ['shop', 'date', 'last_position']
