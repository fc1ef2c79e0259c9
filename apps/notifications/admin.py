from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['id', 'shop', 'user', 'type', 'short_message', 'is_sent', 'created_at', 'acknowledged_at']
    list_filter = ['type', 'is_sent', 'shop']
    search_fields = ['message', 'user__email']
    raw_id_fields = ['user']
    readonly_fields = ['created_at', 'acknowledged_at']

    def short_message(self, obj):
        return obj.message[:60]
    short_message.short_description = 'Message'
