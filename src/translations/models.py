from django.db import models

from src.common.models import AuthoredModel


class TranslatableContentType(models.TextChoices):
    HERITAGE_SITE = "HERITAGE_SITE", "Heritage site"
    FORUM_TOPIC = "FORUM_TOPIC", "Forum topic"
    FORUM_POST = "FORUM_POST", "Forum post"
    FORUM_CATEGORY = "FORUM_CATEGORY", "Forum category"
    DOCUMENT = "DOCUMENT", "Document"
    UI_ELEMENT = "UI_ELEMENT", "UI element"
    EDUCATIONAL_CONTENT = "EDUCATIONAL_CONTENT", "Educational content"
    EDUCATIONAL_ARTICLE = "EDUCATIONAL_ARTICLE", "Educational article"
    QUIZ = "QUIZ", "Quiz"
    QUIZ_QUESTION = "QUIZ_QUESTION", "Quiz question"
    QUIZ_OPTION = "QUIZ_OPTION", "Quiz option"


class TranslationStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    REVIEW = "REVIEW", "In review"
    APPROVED = "APPROVED", "Approved"
    PUBLISHED = "PUBLISHED", "Published"


class Translation(AuthoredModel):
    content_type = models.CharField(max_length=32, choices=TranslatableContentType.choices)
    # Free-form so UI element keys fit as well as entity ids
    content_id = models.CharField(max_length=255)
    language_code = models.CharField(max_length=8)
    field_name = models.CharField(max_length=100)
    translated_text = models.TextField()
    status = models.CharField(max_length=16, choices=TranslationStatus.choices, default=TranslationStatus.PUBLISHED)

    class Meta:
        db_table = "translations"
        ordering = ["content_type", "content_id", "field_name", "language_code"]
        constraints = [
            models.UniqueConstraint(
                fields=["content_type", "content_id", "field_name", "language_code"],
                name="translation_unique_field",
            ),
        ]
        indexes = [
            models.Index(fields=["content_type", "language_code"]),
        ]

    def __str__(self):
        return f"{self.content_type}:{self.content_id}.{self.field_name}[{self.language_code}]"
