from django.contrib import admin

from src.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("recipient", "type", "is_read", "is_active", "created_at")
    list_filter = ("type", "is_read", "is_active")
    raw_id_fields = ("recipient",)
