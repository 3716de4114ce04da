from django.db import models
from django.utils import timezone

from src.common.models import BaseModel


class ForumCategory(BaseModel):
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    language = models.CharField(max_length=8, default="en")
    is_public = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "forum_categories"
        ordering = ["name"]
        verbose_name_plural = "forum categories"

    def __str__(self):
        return self.name


class ForumTopic(BaseModel):
    category = models.ForeignKey(ForumCategory, on_delete=models.PROTECT, related_name="topics")
    title = models.CharField(max_length=255)
    content = models.TextField()
    language = models.CharField(max_length=8, default="en")
    is_public = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True, db_index=True)
    is_pinned = models.BooleanField(default=False)
    is_locked = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="forum_topics",
    )
    last_activity_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "forum_topics"
        ordering = ["-is_pinned", "-last_activity_at"]

    def __str__(self):
        return self.title


class ForumPost(BaseModel):
    topic = models.ForeignKey(ForumTopic, on_delete=models.CASCADE, related_name="posts")
    content = models.TextField()
    language = models.CharField(max_length=8, default="en")
    parent_post = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="replies",
    )
    is_active = models.BooleanField(default=True, db_index=True)
    is_flagged = models.BooleanField(default=False, db_index=True)
    flagged_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    flag_reason = models.TextField(blank=True)
    created_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="forum_posts",
    )

    class Meta:
        db_table = "forum_posts"
        ordering = ["created_at"]

    def __str__(self):
        return f"Post {self.id} in {self.topic_id}"
