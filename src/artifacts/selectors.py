import uuid

from django.db.models import Count, QuerySet

from src.artifacts.models import Artifact
from src.common.search import localized_search_q
from src.core.exceptions import NotFoundError
from src.core.policies import has_permission


def artifact_visible_queryset(*, user) -> QuerySet[Artifact]:
    qs = Artifact.objects.filter(is_active=True).select_related("heritage_site")
    if not has_permission(user, "artifacts.view_private"):
        qs = qs.filter(is_public=True)
    return qs


def artifact_list(
    *,
    user,
    search: str | None = None,
    category: str | None = None,
    site_id: uuid.UUID | None = None,
    is_public: bool | None = None,
) -> QuerySet[Artifact]:
    qs = artifact_visible_queryset(user=user)

    if search and search.strip():
        qs = qs.filter(localized_search_q(search, "name"))
    if category:
        qs = qs.filter(category=category)
    if site_id:
        qs = qs.filter(heritage_site_id=site_id)
    if is_public is not None:
        qs = qs.filter(is_public=is_public)

    return qs.order_by("-created_at")


def artifact_get(*, artifact_id: uuid.UUID, user) -> Artifact:
    try:
        return artifact_visible_queryset(user=user).get(id=artifact_id)
    except Artifact.DoesNotExist:
        raise NotFoundError(message="Artifact not found", code="ARTIFACT_NOT_FOUND")


def artifact_get_for_update(*, artifact_id: uuid.UUID) -> Artifact:
    try:
        return Artifact.objects.select_for_update().get(id=artifact_id, is_active=True)
    except Artifact.DoesNotExist:
        raise NotFoundError(message="Artifact not found", code="ARTIFACT_NOT_FOUND")


def artifact_name_taken(*, site_id: uuid.UUID, name: str, exclude_id: uuid.UUID | None = None) -> bool:
    qs = Artifact.objects.filter(heritage_site_id=site_id, name_key__iexact=name.strip(), is_active=True)
    if exclude_id:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()


def artifacts_stats() -> dict:
    qs = Artifact.objects.filter(is_active=True)
    return {
        "total": qs.count(),
        "public": qs.filter(is_public=True).count(),
        "private": qs.filter(is_public=False).count(),
        "by_category": {
            row["category"]: row["count"]
            for row in qs.values("category").annotate(count=Count("id")).order_by()
        },
    }
