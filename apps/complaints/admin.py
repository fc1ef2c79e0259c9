from django.contrib import admin

from .models import Complaint


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ['id', 'shop', 'user', 'status', 'created_at', 'resolved_at']
    list_filter = ['status', 'shop']
    search_fields = ['description', 'user__email']
    raw_id_fields = ['user']
    readonly_fields = ['created_at', 'updated_at', 'resolved_at']
