import uuid

from ninja import Body, Query
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.core.apis import BaseAPIController
from src.core.auth import OptionalJWTAuth
from src.core.policies import ensure_permission
from src.heritage_sites import selectors, services
from src.heritage_sites.models import SiteCategory, SiteStatus, site_status_next
from src.heritage_sites.presenters import (
    assignment_to_dto,
    site_to_detail_dto,
    site_to_list_dto,
    status_history_to_dto,
)
from src.heritage_sites.schemas import (
    AssignManagerPayload,
    BulkStatusPayload,
    SiteCreatePayload,
    SiteFilterParams,
    SiteStatusChangePayload,
    SiteUpdatePayload,
)


@api_controller("/heritage-sites", tags=["Heritage sites"], auth=JWTAuth())
class HeritageSiteController(BaseAPIController):
    @route.get("/", auth=OptionalJWTAuth())
    def list_sites(self, filters: Query[SiteFilterParams], lang: str | None = None):
        qs = selectors.site_list(
            user=self.current_user,
            status=filters.status,
            category=filters.category,
            region=filters.region,
            search=filters.search,
        )
        paginator = Paginator(default_page_size=20, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Heritage sites fetched",
            data={"items": [site_to_list_dto(s, lang) for s in items], "pagination": meta},
        )

    @route.get("/statistics", auth=OptionalJWTAuth())
    def statistics(self):
        return self.create_response(message="Heritage site statistics", data=selectors.sites_stats())

    @route.get("/statuses", auth=None)
    def statuses(self):
        data = [
            {
                "value": s.value,
                "label": s.label,
                "publicly_visible": s.is_publicly_visible,
                "allows_public_access": s.allows_public_access,
                "next": site_status_next(s.value),
            }
            for s in SiteStatus
        ]
        return self.create_response(message="Site statuses", data=data)

    @route.get("/categories", auth=None)
    def categories(self):
        data = [{"value": c.value, "label": c.label} for c in SiteCategory]
        return self.create_response(message="Site categories", data=data)

    @route.get("/archived")
    def archived_sites(self):
        ensure_permission(self.current_user, "sites.archive")
        items = selectors.site_archived_list()
        return self.create_response(message="Archived sites", data=[site_to_detail_dto(s) for s in items])

    @route.get("/my-sites")
    def my_sites(self):
        ensure_permission(self.current_user, "sites.manage")
        items = selectors.sites_managed_by(user=self.current_user)
        return self.create_response(message="Managed sites", data=[site_to_list_dto(s) for s in items])

    @route.post("/bulk/status")
    def bulk_status(self, body: BulkStatusPayload = Body(...)):
        ensure_permission(self.current_user, "sites.bulk_status")
        result = services.site_bulk_change_status(
            site_ids=body.site_ids,
            new_status=body.new_status,
            changed_by=self.current_user,
            reason=body.reason,
            notes=body.notes,
            request=self.context.request,
        )
        return self.create_response(message="Bulk status update processed", data=result)

    @route.post("/")
    def create_site(self, body: SiteCreatePayload = Body(...)):
        ensure_permission(self.current_user, "sites.create")
        site = services.site_create(created_by=self.current_user, payload=body, request=self.context.request)
        return self.create_response(message="Heritage site created", data=site_to_detail_dto(site), status_code=201)

    @route.get("/{site_id}", auth=OptionalJWTAuth())
    def get_site(self, site_id: uuid.UUID):
        site = selectors.site_get(site_id=site_id, user=self.current_user)
        return self.create_response(message="Heritage site", data=site_to_detail_dto(site))

    @route.patch("/{site_id}")
    def update_site(self, site_id: uuid.UUID, payload: SiteUpdatePayload):
        site = services.site_update(
            site_id=site_id,
            updated_by=self.current_user,
            payload=payload,
            request=self.context.request,
        )
        return self.create_response(message="Heritage site updated", data=site_to_detail_dto(site))

    @route.delete("/{site_id}")
    def archive_site(self, site_id: uuid.UUID, reason: str = ""):
        ensure_permission(self.current_user, "sites.archive")
        site = services.site_archive(
            site_id=site_id,
            archived_by=self.current_user,
            reason=reason,
            request=self.context.request,
        )
        return self.create_response(message="Heritage site archived", data=site_to_detail_dto(site))

    @route.post("/{site_id}/restore")
    def restore_site(self, site_id: uuid.UUID):
        ensure_permission(self.current_user, "sites.archive")
        site = services.site_restore(site_id=site_id, restored_by=self.current_user, request=self.context.request)
        return self.create_response(message="Heritage site restored", data=site_to_detail_dto(site))

    @route.post("/{site_id}/status")
    def change_status(self, site_id: uuid.UUID, body: SiteStatusChangePayload = Body(...)):
        result = services.site_change_status(
            site_id=site_id,
            new_status=body.new_status,
            changed_by=self.current_user,
            reason=body.reason,
            notes=body.notes,
            request=self.context.request,
        )
        return self.create_response(message=result["message"], data=result)

    @route.get("/{site_id}/status/history")
    def status_history(self, site_id: uuid.UUID):
        ensure_permission(self.current_user, "sites.manage")
        site = selectors.site_get_any(site_id=site_id)
        items = selectors.site_status_history(site=site)
        return self.create_response(message="Site status history", data=[status_history_to_dto(h) for h in items])

    @route.get("/{site_id}/status/allowed")
    def allowed_statuses(self, site_id: uuid.UUID):
        site = selectors.site_get(site_id=site_id, user=self.current_user)
        return self.create_response(
            message="Allowed next statuses",
            data={"current_status": site.status, "allowed": site_status_next(site.status)},
        )

    @route.get("/{site_id}/managers")
    def list_managers(self, site_id: uuid.UUID):
        ensure_permission(self.current_user, "sites.manage")
        site = selectors.site_get_any(site_id=site_id)
        items = selectors.site_managers(site=site)
        return self.create_response(message="Site managers", data=[assignment_to_dto(a) for a in items])

    @route.post("/{site_id}/managers")
    def assign_manager(self, site_id: uuid.UUID, body: AssignManagerPayload = Body(...)):
        ensure_permission(self.current_user, "sites.assign_manager")
        assignment = services.site_assign_manager(
            site_id=site_id,
            user_id=body.user_id,
            assigned_by=self.current_user,
            notes=body.notes,
            request=self.context.request,
        )
        return self.create_response(message="Manager assigned", data=assignment_to_dto(assignment), status_code=201)

    @route.delete("/{site_id}/managers/{user_id}")
    def remove_manager(self, site_id: uuid.UUID, user_id: uuid.UUID):
        ensure_permission(self.current_user, "sites.assign_manager")
        services.site_remove_manager(
            site_id=site_id,
            user_id=user_id,
            removed_by=self.current_user,
            request=self.context.request,
        )
        return self.create_response(message="Manager removed")
