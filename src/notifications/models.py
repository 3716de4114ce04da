from django.db import models

from src.common.models import BaseModel


class NotificationType(models.TextChoices):
    REPLY = "reply", "Reply"
    MENTION = "mention", "Mention"
    FLAG = "flag", "Flag"
    MODERATION = "moderation", "Moderation"
    SYSTEM = "system", "System"


class Notification(BaseModel):
    recipient = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="notifications")
    type = models.CharField(max_length=16, choices=NotificationType.choices, default=NotificationType.SYSTEM)
    content = models.TextField()
    related_url = models.CharField(max_length=500, blank=True)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read", "-created_at"]),
        ]

    def __str__(self):
        return f"{self.type} → {self.recipient_id}"
