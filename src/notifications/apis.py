import uuid

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.core.apis import BaseAPIController
from src.notifications import selectors, services
from src.notifications.presenters import notification_to_dto


@api_controller("/notifications", tags=["Notifications"], auth=JWTAuth())
class NotificationController(BaseAPIController):
    def _page(self, qs, message: str):
        paginator = Paginator(default_page_size=20, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message=message,
            data={"items": [notification_to_dto(n) for n in items], "pagination": meta},
        )

    @route.get("/")
    def list_notifications(self):
        return self._page(selectors.notification_list(user=self.current_user), "Notifications fetched")

    @route.get("/unread")
    def unread_notifications(self):
        qs = selectors.notification_list(user=self.current_user, unread_only=True)
        return self._page(qs, "Unread notifications fetched")

    @route.get("/unread/count")
    def unread_count(self):
        return self.create_response(
            message="Unread notification count",
            data={"count": selectors.notification_unread_count(user=self.current_user)},
        )

    @route.post("/read-all")
    def mark_all_read(self):
        updated = services.notification_mark_all_read(user=self.current_user)
        return self.create_response(message="All notifications marked as read", data={"updated": updated})

    @route.post("/{notification_id}/read")
    def mark_read(self, notification_id: uuid.UUID):
        notification = services.notification_mark_read(notification_id=notification_id, user=self.current_user)
        return self.create_response(message="Notification marked as read", data=notification_to_dto(notification))

    @route.delete("/{notification_id}")
    def delete_notification(self, notification_id: uuid.UUID):
        services.notification_delete(notification_id=notification_id, user=self.current_user)
        return self.create_response(message="Notification deleted")
