from ninja import Body
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.auth import services
from src.auth.schemas import LoginPayload, LogoutPayload, RefreshPayload, RegisterPayload
from src.core.apis import BaseAPIController
from src.core.exceptions import BusinessRuleError
from src.users.presenters import user_to_profile_dto


@api_controller("/auth", tags=["Auth"], auth=JWTAuth())
class AuthController(BaseAPIController):
    @route.post("/login", auth=None)
    def login(self, body: LoginPayload = Body(...)):
        result = services.auth_login(
            identifier=body.username,
            password=body.password,
            request=self.context.request,
        )
        user = result.pop("user")
        return self.create_response(
            message="Login successful",
            data={**result, "user": user_to_profile_dto(user)},
        )

    @route.post("/register", auth=None)
    def register(self, body: RegisterPayload = Body(...)):
        user = services.auth_register(
            username=body.username,
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            preferred_language=body.preferred_language,
            request=self.context.request,
        )
        return self.create_response(
            message="Registration successful",
            data={**services.tokens_for_user(user), "user": user_to_profile_dto(user)},
            status_code=201,
        )

    @route.post("/refresh", auth=None)
    def refresh(self, body: RefreshPayload = Body(...)):
        tokens = services.auth_refresh(refresh=body.refresh, request=self.context.request)
        return self.create_response(message="Token refreshed", data=tokens)

    @route.post("/logout")
    def logout(self, body: LogoutPayload = Body(...)):
        """
        Body:
          - refresh?: string (optional when all=true)
          - all?: boolean (default false), revoke all sessions of the user
        """
        refresh = body.refresh.strip()
        if not body.all and not refresh:
            raise BusinessRuleError(message="Provide 'refresh' or set all=true.", code="REFRESH_REQUIRED")

        services.auth_logout(
            user=self.current_user,
            refresh=refresh,
            all_sessions=body.all,
            request=self.context.request,
        )
        return self.create_response(message="All sessions revoked." if body.all else "Logged out.")

    @route.get("/me")
    def me(self):
        return self.create_response(message="Current user", data=user_to_profile_dto(self.current_user))
