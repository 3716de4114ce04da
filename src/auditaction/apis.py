import uuid

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.auditaction import selectors
from src.auditaction.presenters import audit_to_detail_dto, audit_to_list_dto
from src.core.apis import BaseAPIController
from src.core.policies import ensure_permission


@api_controller("/activity", tags=["Activity"], auth=JWTAuth())
class AuditActionController(BaseAPIController):
    @route.get("/actions")
    def list_actions(
        self,
        category: str | None = None,
        action: str | None = None,
        user_id: str | None = None,
        severity: str | None = None,
        target_type: str | None = None,
        target_id: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
        q: str | None = None,
    ):
        """List audit actions with filtering. Administrators only."""
        ensure_permission(self.current_user, "activity.view_all")

        qs = selectors.audit_actions_queryset(
            category=category,
            action=action,
            user_id=user_id,
            severity=severity,
            target_type=target_type,
            target_id=target_id,
            date_from=date_from,
            date_to=date_to,
            q=q,
        )
        items, meta = Paginator(default_page_size=50, max_page_size=200).paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Activity fetched",
            data={"items": [audit_to_list_dto(obj) for obj in items], "pagination": meta},
        )

    @route.get("/me")
    def my_activity(self, category: str | None = None):
        user = self.current_user
        qs = selectors.audit_actions_queryset(user_id=str(user.id), category=category)
        items, meta = Paginator(default_page_size=20, max_page_size=100).paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Activity fetched",
            data={"items": [audit_to_list_dto(obj) for obj in items], "pagination": meta},
        )

    @route.get("/stats/by-category")
    def stats_by_category(self, date_from: str | None = None, date_to: str | None = None):
        ensure_permission(self.current_user, "activity.view_all")
        data = selectors.audit_stats_by_category(date_from=date_from, date_to=date_to)
        return self.create_response(message="Activity statistics", data={"items": data})

    @route.get("/actions/{audit_id}")
    def get_action(self, audit_id: uuid.UUID):
        ensure_permission(self.current_user, "activity.view_all")
        obj = selectors.audit_action_get(audit_id=audit_id)
        return self.create_response(message="Activity entry", data=audit_to_detail_dto(obj))
