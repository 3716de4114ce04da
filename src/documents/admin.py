from django.contrib import admin

from src.documents.models import Document


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ("__str__", "document_type", "language", "is_public", "is_active", "created_at")
    list_filter = ("document_type", "language", "is_public", "is_active")
    search_fields = ("author",)
