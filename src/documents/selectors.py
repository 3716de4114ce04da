import uuid

from django.db.models import Count, Q, QuerySet

from src.common.search import filter_by_tag, localized_search_q
from src.core.exceptions import NotFoundError
from src.core.policies import has_permission
from src.documents.models import Document


def document_visible_queryset(*, user) -> QuerySet[Document]:
    qs = Document.objects.filter(is_active=True).select_related("heritage_site")
    if not has_permission(user, "documents.view_private"):
        qs = qs.filter(is_public=True)
    return qs


def _filtered(
    qs: QuerySet[Document],
    *,
    document_type: str | None = None,
    language: str | None = None,
    tag: str | None = None,
    site_id: uuid.UUID | None = None,
    search: str | None = None,
) -> QuerySet[Document]:
    if document_type:
        qs = qs.filter(document_type=document_type.upper())
    if language:
        qs = qs.filter(language=language.lower())
    if tag and tag.strip():
        qs = filter_by_tag(qs, tag)
    if site_id:
        qs = qs.filter(heritage_site_id=site_id)
    if search and search.strip():
        qs = qs.filter(localized_search_q(search, "title", "description") | Q(author__icontains=search.strip()))
    return qs.order_by("-created_at")


def document_list(*, user, **filters) -> QuerySet[Document]:
    return _filtered(document_visible_queryset(user=user), **filters)


def document_public_list(**filters) -> QuerySet[Document]:
    return _filtered(Document.objects.filter(is_active=True, is_public=True).select_related("heritage_site"),
                     **filters)


def document_get(*, document_id: uuid.UUID, user) -> Document:
    try:
        return document_visible_queryset(user=user).get(id=document_id)
    except Document.DoesNotExist:
        raise NotFoundError(message="Document not found", code="DOCUMENT_NOT_FOUND")


def document_get_for_update(*, document_id: uuid.UUID) -> Document:
    try:
        return Document.objects.select_for_update().get(id=document_id, is_active=True)
    except Document.DoesNotExist:
        raise NotFoundError(message="Document not found", code="DOCUMENT_NOT_FOUND")


def document_types() -> list[str]:
    return sorted(
        Document.objects.filter(is_active=True).values_list("document_type", flat=True).distinct().order_by()
    )


def document_languages() -> list[str]:
    return sorted(Document.objects.filter(is_active=True).values_list("language", flat=True).distinct().order_by())


def documents_stats() -> dict:
    qs = Document.objects.filter(is_active=True)
    return {
        "total": qs.count(),
        "public": qs.filter(is_public=True).count(),
        "private": qs.filter(is_public=False).count(),
        "by_type": {
            row["document_type"]: row["count"]
            for row in qs.values("document_type").annotate(count=Count("id")).order_by()
        },
        "by_language": {
            row["language"]: row["count"]
            for row in qs.values("language").annotate(count=Count("id")).order_by()
        },
    }
