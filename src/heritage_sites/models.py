from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from src.common.models import BaseModel, SoftDeletableModel


class SiteStatus(models.TextChoices):
    PROPOSED = "PROPOSED", "Proposed"
    ACTIVE = "ACTIVE", "Active"
    UNDER_CONSERVATION = "UNDER_CONSERVATION", "Under Conservation"
    INACTIVE = "INACTIVE", "Inactive"
    ARCHIVED = "ARCHIVED", "Archived"

    @property
    def is_publicly_visible(self) -> bool:
        return self in PUBLIC_SITE_STATUSES

    @property
    def allows_public_access(self) -> bool:
        return self == SiteStatus.ACTIVE

    @classmethod
    def from_string(cls, value: str | None) -> "SiteStatus | None":
        """Resolve a status by name or label, ignoring case and surrounding blanks."""
        if not value:
            return None
        needle = value.strip().lower()
        for status in cls:
            if status.value.lower() == needle or status.label.lower() == needle:
                return status
        return None


PUBLIC_SITE_STATUSES = frozenset({SiteStatus.ACTIVE, SiteStatus.UNDER_CONSERVATION})

SITE_STATUS_TRANSITIONS: dict[str, frozenset] = {
    SiteStatus.PROPOSED: frozenset({SiteStatus.ACTIVE, SiteStatus.INACTIVE, SiteStatus.ARCHIVED}),
    SiteStatus.ACTIVE: frozenset(
        {SiteStatus.UNDER_CONSERVATION, SiteStatus.PROPOSED, SiteStatus.INACTIVE, SiteStatus.ARCHIVED}
    ),
    SiteStatus.UNDER_CONSERVATION: frozenset({SiteStatus.ACTIVE, SiteStatus.INACTIVE, SiteStatus.ARCHIVED}),
    SiteStatus.INACTIVE: frozenset(
        {SiteStatus.ACTIVE, SiteStatus.UNDER_CONSERVATION, SiteStatus.PROPOSED, SiteStatus.ARCHIVED}
    ),
    SiteStatus.ARCHIVED: frozenset({SiteStatus.ACTIVE, SiteStatus.INACTIVE, SiteStatus.PROPOSED}),
}


def site_status_can_transition(current: str, target: str) -> bool:
    return target in SITE_STATUS_TRANSITIONS.get(current, frozenset())


def site_status_next(current: str) -> list[str]:
    return sorted(SITE_STATUS_TRANSITIONS.get(current, frozenset()))


class SiteCategory(models.TextChoices):
    CULTURAL = "CULTURAL", "Cultural"
    NATURAL = "NATURAL", "Natural"
    MIXED = "MIXED", "Mixed"
    ARCHAEOLOGICAL = "ARCHAEOLOGICAL", "Archaeological"
    ARCHITECTURAL = "ARCHITECTURAL", "Architectural"
    HISTORICAL = "HISTORICAL", "Historical"
    RELIGIOUS = "RELIGIOUS", "Religious"
    MUSEUM = "MUSEUM", "Museum"
    MEMORIAL = "MEMORIAL", "Memorial"
    TRADITIONAL = "TRADITIONAL", "Traditional"


class HeritageSite(SoftDeletableModel):
    name = models.JSONField(default=dict, help_text='Per-language names, e.g. {"en": "...", "rw": "..."}')
    description = models.JSONField(default=dict, blank=True)
    significance = models.JSONField(default=dict, blank=True)

    address = models.CharField(max_length=255, blank=True)
    region = models.CharField(max_length=100, blank=True, db_index=True)
    gps_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    gps_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    status = models.CharField(max_length=32, choices=SiteStatus.choices, default=SiteStatus.PROPOSED, db_index=True)
    category = models.CharField(max_length=32, choices=SiteCategory.choices, blank=True, db_index=True)
    ownership_type = models.CharField(max_length=100, blank=True)
    established_year = models.PositiveIntegerField(null=True, blank=True)
    contact_info = models.CharField(max_length=255, blank=True)

    archive_reason = models.TextField(blank=True)
    archive_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "heritage_sites"
        ordering = ["-created_at"]

    def __str__(self):
        return self.name.get(settings.DEFAULT_CONTENT_LANGUAGE) or str(self.id)


class SiteManagerStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"
    SUSPENDED = "SUSPENDED", "Suspended"


class HeritageSiteManager(BaseModel):
    site = models.ForeignKey(HeritageSite, on_delete=models.CASCADE, related_name="manager_assignments")
    user = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="site_assignments")
    status = models.CharField(max_length=16, choices=SiteManagerStatus.choices, default=SiteManagerStatus.ACTIVE)
    assigned_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    assigned_at = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "heritage_site_managers"
        ordering = ["-assigned_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["site", "user"],
                condition=Q(status="ACTIVE"),
                name="site_manager_active_unique",
            ),
        ]


class SiteStatusHistory(BaseModel):
    site = models.ForeignKey(HeritageSite, on_delete=models.CASCADE, related_name="status_history")
    previous_status = models.CharField(max_length=32, choices=SiteStatus.choices, blank=True)
    new_status = models.CharField(max_length=32, choices=SiteStatus.choices)
    reason = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    changed_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    changed_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "heritage_site_status_history"
        ordering = ["-changed_at"]
