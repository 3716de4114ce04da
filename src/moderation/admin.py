from django.contrib import admin

from src.moderation.models import CommunityReport, ModerationHistory


@admin.register(ModerationHistory)
class ModerationHistoryAdmin(admin.ModelAdmin):
    list_display = ("created_at", "moderator", "content_type", "action_type", "previous_status", "new_status")
    list_filter = ("content_type", "action_type", "automated")
    ordering = ("-created_at",)


@admin.register(CommunityReport)
class CommunityReportAdmin(admin.ModelAdmin):
    list_display = ("reported_at", "content_type", "reason", "reporter", "is_resolved")
    list_filter = ("content_type", "reason", "is_resolved")
    raw_id_fields = ("reporter", "resolved_by")
