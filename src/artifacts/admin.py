from django.contrib import admin

from src.artifacts.models import Artifact


@admin.register(Artifact)
class ArtifactAdmin(admin.ModelAdmin):
    list_display = ("name_key", "heritage_site", "category", "is_public", "is_active", "created_at")
    list_filter = ("category", "is_public", "is_active")
    search_fields = ("name_key",)
    raw_id_fields = ("heritage_site", "created_by", "updated_by")
