import uuid

from ninja import Body, Query
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.core.apis import BaseAPIController
from src.core.policies import ensure_permission
from src.users import selectors, services
from src.users.presenters import user_to_detail_dto, user_to_list_dto, user_to_profile_dto
from src.users.schemas import (
    PasswordChangePayload,
    ProfileUpdatePayload,
    StatusChangePayload,
    UserCreatePayload,
    UserFilterParams,
    UserUpdatePayload,
)
from src.users.throttlers import PasswordChangeThrottle


@api_controller("/users", tags=["Users"], auth=JWTAuth())
class UserController(BaseAPIController):
    """Account administration. Every route except statistics is for system administrators."""

    def _admin(self):
        user = self.current_user
        ensure_permission(user, "users.manage")
        return user

    @route.post("/")
    def create_user(self, body: UserCreatePayload = Body(...)):
        current_user = self._admin()
        user = services.user_create_by_admin(
            created_by=current_user,
            username=body.username,
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            role=body.role,
            status=body.status,
            preferred_language=body.preferred_language,
            request=self.context.request,
        )
        return self.create_response(
            message="User created successfully",
            data=user_to_detail_dto(user),
            status_code=201,
        )

    @route.get("/")
    def list_users(self, filters: Query[UserFilterParams]):
        self._admin()
        qs = selectors.user_list(status=filters.status, role=filters.role, search=filters.search)

        paginator = Paginator(default_page_size=10, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)

        return self.create_response(
            message="Users fetched",
            data={"items": [user_to_list_dto(u) for u in items], "pagination": meta},
            status_code=200,
        )

    @route.get("/statistics", auth=None)
    def users_stats(self):
        return self.create_response(
            message="Users statistics",
            data=selectors.users_stats(),
            status_code=200,
        )

    @route.get("/{user_id}")
    def get_user(self, user_id: uuid.UUID):
        self._admin()
        user = selectors.user_get_by_id(user_id=user_id)
        return self.create_response(message="User", data=user_to_detail_dto(user))

    @route.patch("/{user_id}")
    def update_user(self, user_id: uuid.UUID, payload: UserUpdatePayload):
        current_user = self._admin()
        user = services.user_update(
            user_id=user_id,
            updated_by=current_user,
            payload=payload,
            request=self.context.request,
        )
        return self.create_response(message="User updated successfully", data=user_to_detail_dto(user))

    def _status_action(self, user_id: uuid.UUID, action: str, reason: str, message: str):
        current_user = self._admin()
        user = services.user_change_status(
            user_id=user_id,
            action=action,
            changed_by=current_user,
            reason=reason,
            request=self.context.request,
        )
        return self.create_response(
            message=message,
            data={"id": str(user.id), "status": user.status, "status_reason": user.status_reason},
        )

    @route.post("/{user_id}/suspend")
    def suspend_user(self, user_id: uuid.UUID, body: StatusChangePayload = Body(...)):
        return self._status_action(user_id, "suspend", body.reason, "User suspended successfully")

    @route.post("/{user_id}/disable")
    def disable_user(self, user_id: uuid.UUID, body: StatusChangePayload = Body(...)):
        return self._status_action(user_id, "disable", body.reason, "User disabled successfully")

    @route.post("/{user_id}/reactivate")
    def reactivate_user(self, user_id: uuid.UUID, body: StatusChangePayload = Body(...)):
        return self._status_action(user_id, "reactivate", body.reason, "User reactivated successfully")

    @route.post("/{user_id}/restore")
    def restore_user(self, user_id: uuid.UUID, body: StatusChangePayload = Body(...)):
        return self._status_action(user_id, "restore", body.reason, "User restored successfully")

    @route.delete("/{user_id}")
    def delete_user(self, user_id: uuid.UUID, reason: str = ""):
        return self._status_action(user_id, "delete", reason, "User deleted successfully")

    @route.post("/{user_id}/unlock")
    def unlock_user(self, user_id: uuid.UUID):
        current_user = self._admin()
        user = services.user_unlock(user_id=user_id, unlocked_by=current_user, request=self.context.request)
        return self.create_response(message="User unlocked", data={"id": str(user.id), "is_locked": user.is_locked})


@api_controller("/users/profile", tags=["Profile"], auth=JWTAuth())
class ProfileController(BaseAPIController):
    @route.get("/me")
    def get_profile(self):
        return self.create_response(message="Current user profile", data=user_to_profile_dto(self.current_user))

    @route.patch("/me")
    def update_profile(self, payload: ProfileUpdatePayload):
        user = services.profile_update(user=self.current_user, payload=payload, request=self.context.request)
        return self.create_response(message="Profile updated successfully", data=user_to_profile_dto(user))

    @route.post("/me/password", throttle=PasswordChangeThrottle())
    def change_password(self, body: PasswordChangePayload = Body(...)):
        services.user_change_password(
            user=self.current_user,
            current_password=body.current_password,
            new_password=body.new_password,
            request=self.context.request,
        )
        return self.create_response(message="Password changed. Please sign in again.")
