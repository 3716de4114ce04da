import uuid

from django.db import models


class BaseModel(models.Model):
    """Abstract base model with a UUID key and created/updated tracking."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AuthoredModel(BaseModel):
    """Content rows that keep track of who created and last touched them."""

    created_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    updated_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        abstract = True


class SoftDeletableModel(AuthoredModel):
    """Provide soft delete semantics while keeping history."""

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        abstract = True
