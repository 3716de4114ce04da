import uuid

from ninja import Body, Query
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.core.apis import BaseAPIController
from src.core.policies import ensure_permission
from src.moderation import selectors, services
from src.moderation.presenters import flagged_post_to_dto, history_to_dto, report_to_dto
from src.moderation.schemas import (
    BulkModerationPayload,
    HistoryFilterParams,
    ModerationPayload,
    ReportCreatePayload,
    ReportResolvePayload,
)


@api_controller("/moderation", tags=["Moderation"], auth=JWTAuth())
class ModerationController(BaseAPIController):
    def _moderator(self):
        user = self.current_user
        ensure_permission(user, "moderation.manage")
        return user

    @route.post("/actions")
    def moderate(self, body: ModerationPayload = Body(...)):
        entry = services.moderate(
            moderator=self._moderator(),
            content_type=body.content_type,
            content_id=body.content_id,
            action=body.action,
            reason=body.reason,
            request=self.context.request,
        )
        return self.create_response(message="Moderation action applied", data=history_to_dto(entry))

    @route.post("/actions/bulk")
    def moderate_bulk(self, body: BulkModerationPayload = Body(...)):
        result = services.moderate_bulk(
            moderator=self._moderator(),
            content_type=body.content_type,
            content_ids=body.content_ids,
            action=body.action,
            reason=body.reason,
            request=self.context.request,
        )
        return self.create_response(message="Bulk moderation processed", data=result)

    @route.get("/history")
    def history(self, filters: Query[HistoryFilterParams]):
        self._moderator()
        qs = selectors.history_list(**filters.dict())
        paginator = Paginator(default_page_size=20, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Moderation history",
            data={"items": [history_to_dto(h) for h in items], "pagination": meta},
        )

    @route.get("/history/{content_type}/{content_id}")
    def content_history(self, content_type: str, content_id: uuid.UUID):
        self._moderator()
        items = selectors.history_for_content(content_type=content_type, content_id=content_id)
        return self.create_response(message="Content moderation history", data=[history_to_dto(h) for h in items])

    @route.get("/flagged")
    def flagged(self):
        self._moderator()
        data = {
            "posts": [flagged_post_to_dto(p) for p in selectors.flagged_posts()],
            "reported_topics": [{"id": str(t.id), "title": t.title} for t in selectors.reported_topics()],
        }
        return self.create_response(message="Flagged content", data=data)

    @route.get("/statistics")
    def statistics(self):
        self._moderator()
        return self.create_response(message="Moderation statistics", data=selectors.moderation_stats())


@api_controller("/community-reports", tags=["Community reports"], auth=JWTAuth())
class CommunityReportController(BaseAPIController):
    @route.post("/")
    def create_report(self, body: ReportCreatePayload = Body(...)):
        ensure_permission(self.current_user, "forum.participate")
        report = services.report_create(
            reporter=self.current_user,
            content_type=body.content_type,
            content_id=body.content_id,
            reason=body.reason,
            description=body.description,
        )
        return self.create_response(message="Report submitted", data=report_to_dto(report), status_code=201)

    @route.get("/")
    def list_reports(self, is_resolved: bool | None = None, content_type: str | None = None):
        ensure_permission(self.current_user, "reports.manage")
        qs = selectors.report_list(is_resolved=is_resolved, content_type=content_type)
        paginator = Paginator(default_page_size=20, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Community reports",
            data={"items": [report_to_dto(r) for r in items], "pagination": meta},
        )

    @route.get("/{report_id}")
    def get_report(self, report_id: uuid.UUID):
        ensure_permission(self.current_user, "reports.manage")
        return self.create_response(message="Community report",
                                    data=report_to_dto(selectors.report_get(report_id=report_id)))

    @route.post("/{report_id}/resolve")
    def resolve_report(self, report_id: uuid.UUID, body: ReportResolvePayload = Body(...)):
        ensure_permission(self.current_user, "reports.manage")
        report = services.report_resolve(
            report_id=report_id,
            resolved_by=self.current_user,
            action=body.action,
            notes=body.notes,
            request=self.context.request,
        )
        return self.create_response(message="Report resolved", data=report_to_dto(report))
