from django.db import models
from django.db.models import Q
from django.db.models.functions import Lower

from src.common.models import SoftDeletableModel


class ArtifactCategory(models.TextChoices):
    POTTERY = "POTTERY", "Pottery"
    TEXTILE = "TEXTILE", "Textile"
    TOOL = "TOOL", "Tool"
    WEAPON = "WEAPON", "Weapon"
    JEWELRY = "JEWELRY", "Jewelry"
    SCULPTURE = "SCULPTURE", "Sculpture"
    PAINTING = "PAINTING", "Painting"
    MUSICAL_INSTRUMENT = "MUSICAL_INSTRUMENT", "Musical instrument"
    BASKETRY = "BASKETRY", "Basketry"
    MANUSCRIPT = "MANUSCRIPT", "Manuscript"
    OTHER = "OTHER", "Other"


class Artifact(SoftDeletableModel):
    name = models.JSONField(default=dict)
    description = models.JSONField(default=dict, blank=True)
    # Copy of the default-language name, used for the per-site uniqueness constraint.
    name_key = models.CharField(max_length=255, editable=False)
    category = models.CharField(max_length=32, choices=ArtifactCategory.choices, default=ArtifactCategory.OTHER,
                                db_index=True)
    heritage_site = models.ForeignKey(
        "heritage_sites.HeritageSite",
        on_delete=models.PROTECT,
        related_name="artifacts",
    )
    is_public = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "artifacts"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                Lower("name_key"),
                "heritage_site",
                condition=Q(is_active=True),
                name="artifact_site_name_unique",
            ),
        ]

    def __str__(self):
        return self.name_key
