from django.contrib import admin

from src.translations.models import Translation


@admin.register(Translation)
class TranslationAdmin(admin.ModelAdmin):
    list_display = ("content_type", "content_id", "field_name", "language_code", "status", "updated_at")
    list_filter = ("content_type", "language_code", "status")
    search_fields = ("content_id", "field_name", "translated_text")
