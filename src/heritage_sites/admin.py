from django.contrib import admin

from src.heritage_sites.models import HeritageSite, HeritageSiteManager, SiteStatusHistory


@admin.register(HeritageSite)
class HeritageSiteAdmin(admin.ModelAdmin):
    list_display = ("__str__", "region", "category", "status", "is_active", "created_at")
    list_filter = ("status", "category", "is_active")
    search_fields = ("region", "address")
    readonly_fields = ("created_at", "updated_at", "archive_date")


@admin.register(HeritageSiteManager)
class HeritageSiteManagerAdmin(admin.ModelAdmin):
    list_display = ("site", "user", "status", "assigned_by", "assigned_at")
    list_filter = ("status",)
    raw_id_fields = ("site", "user", "assigned_by")


@admin.register(SiteStatusHistory)
class SiteStatusHistoryAdmin(admin.ModelAdmin):
    list_display = ("site", "previous_status", "new_status", "changed_by", "changed_at")
    list_filter = ("new_status",)
    ordering = ("-changed_at",)
