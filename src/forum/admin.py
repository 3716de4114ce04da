from django.contrib import admin

from src.forum.models import ForumCategory, ForumPost, ForumTopic


@admin.register(ForumCategory)
class ForumCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "language", "is_public", "is_active")
    list_filter = ("language", "is_public", "is_active")


@admin.register(ForumTopic)
class ForumTopicAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "is_pinned", "is_locked", "is_active", "last_activity_at")
    list_filter = ("is_pinned", "is_locked", "is_active")
    search_fields = ("title",)


@admin.register(ForumPost)
class ForumPostAdmin(admin.ModelAdmin):
    list_display = ("id", "topic", "created_by", "is_flagged", "is_active", "created_at")
    list_filter = ("is_flagged", "is_active")
    raw_id_fields = ("topic", "parent_post", "created_by", "flagged_by")
