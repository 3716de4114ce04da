import uuid

from django.db import models
from django.utils import timezone

from src.common.models import BaseModel


class ModeratedContentType(models.TextChoices):
    TOPIC = "TOPIC", "Topic"
    POST = "POST", "Post"
    USER = "USER", "User"


class ModerationActionType(models.TextChoices):
    FLAG = "FLAG", "Flag"
    APPROVE = "APPROVE", "Approve"
    REJECT = "REJECT", "Reject"
    DELETE = "DELETE", "Delete"
    LOCK = "LOCK", "Lock"
    PIN = "PIN", "Pin"
    BULK_ACTION = "BULK_ACTION", "Bulk action"


class ModerationHistory(BaseModel):
    moderator = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="moderation_actions",
    )
    content_type = models.CharField(max_length=16, choices=ModeratedContentType.choices, db_index=True)
    content_id = models.UUIDField(null=True, blank=True, db_index=True)
    action_type = models.CharField(max_length=16, choices=ModerationActionType.choices, db_index=True)
    reason = models.TextField(blank=True)
    previous_status = models.CharField(max_length=16, blank=True)
    new_status = models.CharField(max_length=16, blank=True)
    automated = models.BooleanField(default=False)
    confidence_score = models.FloatField(null=True, blank=True)
    bulk_action_id = models.UUIDField(null=True, blank=True, db_index=True)
    affected_count = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "moderation_history"
        ordering = ["-created_at"]
        verbose_name_plural = "moderation history"


class ReportReason(models.TextChoices):
    SPAM = "SPAM", "Spam"
    INAPPROPRIATE = "INAPPROPRIATE", "Inappropriate"
    OFF_TOPIC = "OFF_TOPIC", "Off topic"
    HARASSMENT = "HARASSMENT", "Harassment"
    MISLEADING = "MISLEADING", "Misleading"
    OTHER = "OTHER", "Other"


class ReportedContentType(models.TextChoices):
    TOPIC = "TOPIC", "Topic"
    POST = "POST", "Post"


class CommunityReport(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    content_type = models.CharField(max_length=16, choices=ReportedContentType.choices)
    content_id = models.UUIDField(db_index=True)
    reporter = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="reports")
    reason = models.CharField(max_length=16, choices=ReportReason.choices)
    description = models.TextField(blank=True)
    is_resolved = models.BooleanField(default=False, db_index=True)
    resolved_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    resolution_action = models.CharField(max_length=16, blank=True)
    resolution_notes = models.TextField(blank=True)
    reported_at = models.DateTimeField(default=timezone.now, db_index=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "community_reports"
        ordering = ["-reported_at"]
