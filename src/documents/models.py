from django.db import models

from src.common.models import SoftDeletableModel


class DocumentType(models.TextChoices):
    REPORT = "REPORT", "Report"
    RESEARCH_PAPER = "RESEARCH_PAPER", "Research paper"
    ARCHIVAL_RECORD = "ARCHIVAL_RECORD", "Archival record"
    MANUSCRIPT = "MANUSCRIPT", "Manuscript"
    PHOTOGRAPH = "PHOTOGRAPH", "Photograph"
    MAP = "MAP", "Map"
    LEGAL = "LEGAL", "Legal document"
    OTHER = "OTHER", "Other"


class Document(SoftDeletableModel):
    title = models.JSONField(default=dict)
    description = models.JSONField(default=dict, blank=True)
    author = models.CharField(max_length=255, blank=True)
    document_type = models.CharField(max_length=32, choices=DocumentType.choices, default=DocumentType.OTHER,
                                     db_index=True)
    tags = models.JSONField(default=list, blank=True)
    language = models.CharField(max_length=8, default="en", db_index=True)
    heritage_site = models.ForeignKey(
        "heritage_sites.HeritageSite",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="documents",
    )
    is_public = models.BooleanField(default=False, db_index=True)

    class Meta:
        db_table = "documents"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title.get("en") or str(self.id)
