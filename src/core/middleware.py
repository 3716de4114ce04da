import logging
import uuid

from django.conf import settings
from django.http import JsonResponse

from src.common.utils import get_client_ip
from src.core.ratelimit import CATEGORY_LABELS, hit_counter, resolve_rate_category

log = logging.getLogger(__name__)

RATE_LIMIT_WINDOW = 60


class RequestIDMiddleware:
    """
    Attach a request id to every request and echo it back in X-Request-Id.
    Must run before django_structlog's RequestMiddleware so both agree on the id.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        req_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        request.request_id = req_id
        request.META["HTTP_X_REQUEST_ID"] = req_id
        response = self.get_response(request)
        response["X-Request-Id"] = req_id
        return response


class RateLimitMiddleware:
    """Fixed one-minute request budget per client IP and endpoint category."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if getattr(settings, "RATE_LIMIT_ENABLED", True):
            category = resolve_rate_category(request.path, request.method)
            limit = settings.RATE_LIMITS.get(category) if category else None
            ip = get_client_ip(request) or "unknown"
            if limit is not None:
                count = hit_counter(f"ratelimit:{category}:{ip}", window=RATE_LIMIT_WINDOW)
                if count > limit:
                    return self._too_many_requests(ip, category, limit)
        return self.get_response(request)

    def _too_many_requests(self, ip: str, category: str, limit: int):
        label = CATEGORY_LABELS.get(category, category)
        log.warning("Rate limit exceeded for IP %s on %s (limit %s requests/minute)", ip, label, limit)
        response = JsonResponse(
            {
                "error": "Too many requests",
                "message": f"Rate limit exceeded for {label}. Please try again in a minute.",
                "retryAfter": RATE_LIMIT_WINDOW,
            },
            status=429,
        )
        response["Retry-After"] = str(RATE_LIMIT_WINDOW)
        return response


class SecurityHeadersMiddleware:
    """
    Headers Django's SecurityMiddleware does not set on its own.
    nosniff, Referrer-Policy and HSTS come from SecurityMiddleware; X-Frame-Options
    from XFrameOptionsMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        response.setdefault("X-XSS-Protection", "1; mode=block")
        response.setdefault("Permissions-Policy", settings.PERMISSIONS_POLICY)
        response.setdefault("Content-Security-Policy", settings.CONTENT_SECURITY_POLICY)
        return response
