from __future__ import annotations
from typing import Any

from ninja_extra.controllers import ControllerBase

from src.common.utils import get_request_id


class BaseAPIController(ControllerBase):
    @property
    def current_user(self):
        """Authenticated user, or AnonymousUser on routes with optional auth."""
        request = self.context.request
        return getattr(request, "auth", None) or request.user

    def create_response(self, *, message: str = "", data: Any = None, extra: dict[str, Any] | None = None,
                        errors: Any = None, status_code: int = 200, code: str | None = None,):

        request = getattr(self, "context", None) and getattr(self.context, "request", None)
        request_id = get_request_id(request) if request else ""

        payload = {"success": 200 <= status_code < 400,
                   "message": message,
                   "data": data if data is not None else {},
                   "extra": extra or {},
                   "errors": errors,
                   "code": code,
                   "request_id": request_id,
                   }
        return super().create_response(payload, status_code=status_code)
