from django.contrib import admin
from src.auditaction.models import AuditLog


@admin.register(AuditLog)
class AuditActionAdmin(admin.ModelAdmin):
    list_display = (
        "created_at",
        "category",
        "action",
        "severity",
        "user",
        "target_type",
        "target_id",
        "ip_address",
    )
    list_filter = ("category", "severity")
    search_fields = ("action", "user__email", "target_type", "target_id")
    readonly_fields = (
        "created_at",
        "updated_at",
        "user",
        "category",
        "action",
        "severity",
        "target_type",
        "target_id",
        "details",
        "ip_address",
        "user_agent",
        "request_id",
    )
    ordering = ("-created_at",)
