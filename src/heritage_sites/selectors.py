import uuid

from django.db.models import Count, Q, QuerySet

from src.common.search import localized_search_q
from src.core.exceptions import NotFoundError
from src.core.policies import has_permission, is_admin, user_role
from src.heritage_sites.models import (
    PUBLIC_SITE_STATUSES,
    HeritageSite,
    HeritageSiteManager,
    SiteManagerStatus,
    SiteStatusHistory,
)
from src.users.models import UserRole


def managed_site_ids(*, user) -> QuerySet:
    return HeritageSiteManager.objects.filter(user=user, status=SiteManagerStatus.ACTIVE).values("site_id")


def is_site_manager(*, user, site: HeritageSite) -> bool:
    if user_role(user) != UserRole.HERITAGE_MANAGER:
        return False
    return HeritageSiteManager.objects.filter(site=site, user=user, status=SiteManagerStatus.ACTIVE).exists()


def site_visible_queryset(*, user) -> QuerySet[HeritageSite]:
    """
    Sites the caller may see:
      - administrators: every active site, whatever its status;
      - heritage managers: public sites plus the ones they are assigned to;
      - everyone else: active sites in a publicly visible status.
    """
    qs = HeritageSite.objects.filter(is_active=True)
    public = Q(status__in=PUBLIC_SITE_STATUSES)

    if is_admin(user):
        return qs
    if user_role(user) == UserRole.HERITAGE_MANAGER:
        return qs.filter(public | Q(id__in=managed_site_ids(user=user)))
    return qs.filter(public)


def site_list(
    *,
    user,
    status: str | None = None,
    category: str | None = None,
    region: str | None = None,
    search: str | None = None,
) -> QuerySet[HeritageSite]:
    qs = site_visible_queryset(user=user)

    if status:
        qs = qs.filter(status=status)
    if category:
        qs = qs.filter(category=category)
    if region:
        qs = qs.filter(region__iexact=region.strip())
    if search and search.strip():
        qs = qs.filter(localized_search_q(search, "name", "description") | Q(address__icontains=search.strip()))

    return qs.order_by("-created_at")


def site_get(*, site_id: uuid.UUID, user) -> HeritageSite:
    """Visible site by id. A site hidden from the caller is reported as missing."""
    try:
        return site_visible_queryset(user=user).get(id=site_id)
    except HeritageSite.DoesNotExist:
        raise NotFoundError(message="Heritage site not found", code="SITE_NOT_FOUND")


def site_get_for_update(*, site_id: uuid.UUID) -> HeritageSite:
    try:
        return HeritageSite.objects.select_for_update().get(id=site_id)
    except HeritageSite.DoesNotExist:
        raise NotFoundError(message="Heritage site not found", code="SITE_NOT_FOUND")


def site_get_any(*, site_id: uuid.UUID) -> HeritageSite:
    """Site by id regardless of visibility (archived sites included)."""
    try:
        return HeritageSite.objects.get(id=site_id)
    except HeritageSite.DoesNotExist:
        raise NotFoundError(message="Heritage site not found", code="SITE_NOT_FOUND")


def site_archived_list() -> QuerySet[HeritageSite]:
    return HeritageSite.objects.filter(is_active=False).order_by("-archive_date")


def site_status_history(*, site: HeritageSite) -> QuerySet[SiteStatusHistory]:
    return site.status_history.select_related("changed_by").order_by("-changed_at")


def site_managers(*, site: HeritageSite, include_inactive: bool = False) -> QuerySet[HeritageSiteManager]:
    qs = site.manager_assignments.select_related("user", "assigned_by")
    if not include_inactive:
        qs = qs.filter(status=SiteManagerStatus.ACTIVE)
    return qs


def sites_managed_by(*, user) -> QuerySet[HeritageSite]:
    return HeritageSite.objects.filter(id__in=managed_site_ids(user=user), is_active=True).order_by("-created_at")


def can_manage_site(*, user, site: HeritageSite) -> bool:
    """Administrators manage every site, heritage managers only their assigned ones."""
    if is_admin(user):
        return True
    return has_permission(user, "sites.manage") and is_site_manager(user=user, site=site)


def sites_stats() -> dict:
    qs = HeritageSite.objects.filter(is_active=True)

    def _grouped(field: str) -> dict:
        return {
            (row[field] or "UNSPECIFIED"): row["count"]
            for row in qs.values(field).annotate(count=Count("id")).order_by()
        }

    return {
        "total": qs.count(),
        "archived": HeritageSite.objects.filter(is_active=False).count(),
        "by_status": _grouped("status"),
        "by_category": _grouped("category"),
        "by_region": _grouped("region"),
    }
