from django.db import models
from src.common.models import BaseModel


class AuditCategory(models.TextChoices):
    AUTH = "AUTH", "Authentication"
    USER = "USER", "User"
    SITE = "SITE", "Heritage site"
    ARTIFACT = "ARTIFACT", "Artifact"
    DOCUMENT = "DOCUMENT", "Document"
    FORUM = "FORUM", "Forum"
    MODERATION = "MODERATION", "Moderation"
    QUIZ = "QUIZ", "Quiz"
    TRANSLATION = "TRANSLATION", "Translation"
    SYSTEM = "SYSTEM", "System"


class Severity(models.TextChoices):
    INFO = "INFO", "Info"
    WARNING = "WARNING", "Warning"
    ERROR = "ERROR", "Error"
    CRITICAL = "CRITICAL", "Critical"


class AuditAction(models.TextChoices):
    AUTH_LOGIN_SUCCESS = "AUTH_LOGIN_SUCCESS", "Login success"
    AUTH_LOGIN_FAILED = "AUTH_LOGIN_FAILED", "Login failed"
    AUTH_ACCOUNT_LOCKED = "AUTH_ACCOUNT_LOCKED", "Account locked"
    AUTH_LOGOUT = "AUTH_LOGOUT", "Logout"
    AUTH_REGISTERED = "AUTH_REGISTERED", "Self registration"
    AUTH_TOKEN_REFRESHED = "AUTH_TOKEN_REFRESHED", "Token refreshed"

    # Users
    USER_CREATED = "USER_CREATED", "User created"
    USER_UPDATED = "USER_UPDATED", "User updated"
    USER_SUSPENDED = "USER_SUSPENDED", "User suspended"
    USER_DISABLED = "USER_DISABLED", "User disabled"
    USER_DELETED = "USER_DELETED", "User deleted"
    USER_REACTIVATED = "USER_REACTIVATED", "User reactivated"
    USER_RESTORED = "USER_RESTORED", "User restored"
    USER_UNLOCKED = "USER_UNLOCKED", "User unlocked"
    USER_PROFILE_UPDATED = "USER_PROFILE_UPDATED", "Profile updated"
    USER_PASSWORD_CHANGED = "USER_PASSWORD_CHANGED", "Password changed"

    # Heritage sites
    SITE_CREATED = "SITE_CREATED", "Site created"
    SITE_UPDATED = "SITE_UPDATED", "Site updated"
    SITE_ARCHIVED = "SITE_ARCHIVED", "Site archived"
    SITE_RESTORED = "SITE_RESTORED", "Site restored"
    SITE_STATUS_CHANGED = "SITE_STATUS_CHANGED", "Site status changed"
    SITE_MANAGER_ASSIGNED = "SITE_MANAGER_ASSIGNED", "Site manager assigned"
    SITE_MANAGER_REMOVED = "SITE_MANAGER_REMOVED", "Site manager removed"

    # Content
    ARTIFACT_CREATED = "ARTIFACT_CREATED", "Artifact created"
    ARTIFACT_UPDATED = "ARTIFACT_UPDATED", "Artifact updated"
    ARTIFACT_DELETED = "ARTIFACT_DELETED", "Artifact deleted"
    DOCUMENT_CREATED = "DOCUMENT_CREATED", "Document created"
    DOCUMENT_UPDATED = "DOCUMENT_UPDATED", "Document updated"
    DOCUMENT_DELETED = "DOCUMENT_DELETED", "Document deleted"
    QUIZ_CREATED = "QUIZ_CREATED", "Quiz created"
    QUIZ_UPDATED = "QUIZ_UPDATED", "Quiz updated"
    QUIZ_DELETED = "QUIZ_DELETED", "Quiz deleted"

    # Forum and moderation
    FORUM_TOPIC_DELETED = "FORUM_TOPIC_DELETED", "Topic deleted"
    FORUM_POST_DELETED = "FORUM_POST_DELETED", "Post deleted"
    MODERATION_ACTION = "MODERATION_ACTION", "Moderation action"
    MODERATION_BULK_ACTION = "MODERATION_BULK_ACTION", "Bulk moderation"
    REPORT_RESOLVED = "REPORT_RESOLVED", "Report resolved"

    # Translations
    TRANSLATION_SAVED = "TRANSLATION_SAVED", "Translation saved"
    TRANSLATION_DELETED = "TRANSLATION_DELETED", "Translation deleted"

    # Email services
    EMAIL_SENT = "EMAIL_SENT", "Email delivered"
    EMAIL_SEND_FAILED = "EMAIL_SEND_FAILED", "Email delivery failed"


class AuditLog(BaseModel):
    """
    Activity journal for security and workflow events.
    """

    # Actor
    user = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_actions",
    )
    # What
    category = models.CharField(
        max_length=32, choices=AuditCategory.choices, default=AuditCategory.SYSTEM
    )
    action = models.CharField(max_length=50, choices=AuditAction.choices, db_index=True)

    # Optional target
    target_type = models.CharField(
        max_length=50,
        blank=True,
        null=True,
        help_text="Resource type: 'user', 'heritage_site', 'forum_topic', ...",
    )
    target_id = models.CharField(
        max_length=255, blank=True, null=True, help_text="Affected resource id"
    )

    # Context
    details = models.JSONField(
        default=dict, blank=True, help_text="Additional context"
    )
    severity = models.CharField(
        max_length=16, choices=Severity.choices, default=Severity.INFO
    )

    # Request metadata
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    request_id = models.CharField(max_length=64, blank=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category", "-created_at"]),
            models.Index(fields=["action"]),
            models.Index(fields=["user"]),
            models.Index(fields=["target_type", "target_id"]),
        ]

    def __str__(self) -> str:
        actor = self.user.email if self.user else "system"
        target = f"{self.target_type}:{self.target_id}" if self.target_type else ""
        return f"[{self.category}] {self.action} by {actor} {target} at {self.created_at:%Y-%m-%d %H:%M:%S}"
