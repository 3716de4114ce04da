import math
from datetime import timedelta

from django.core.cache import cache
from django.utils import timezone

from src.core.exceptions import RateLimitedError


def enforce_min_interval(last_sent_at, *, seconds: int, code: str, message: str, ) -> None:
    """
    Raise a RateLimitedError (429) if now - last_sent_at < seconds.
    Use this for lightweight rate limits (no DB changes).
    """
    if not last_sent_at:
        return
    elapsed = timezone.now() - last_sent_at
    if elapsed < timedelta(seconds=seconds):
        wait = max(1, math.ceil(seconds - elapsed.total_seconds()))
        raise RateLimitedError(message=message, code=code, retry_after=wait)


def hit_counter(key: str, *, window: int) -> int:
    """
    Increment a cache counter that expires `window` seconds after its first hit.
    Returns the count including this hit.
    """
    try:
        return cache.incr(key)
    except ValueError:
        # Key doesn't exist yet: initialize it
        if cache.add(key, 1, timeout=window):
            return 1
        return cache.incr(key)


def resolve_rate_category(path: str, method: str) -> str | None:
    """Map a request onto one of the configured rate-limit categories."""
    if method == "POST" and path.rstrip("/") == "/api/auth/login":
        return "login"
    if method == "POST" and path.rstrip("/") == "/api/auth/register":
        return "register"
    if "/upload" in path or "/media" in path:
        return "upload"
    if path.startswith("/api/"):
        return "api"
    return None


CATEGORY_LABELS = {
    "login": "login",
    "register": "registration",
    "upload": "file upload",
    "api": "API",
}
