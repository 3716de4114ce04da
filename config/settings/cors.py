from config.env import env

CORS_URLS_REGEX = r"^/api/.*$"
CORS_ALLOW_CREDENTIALS = True
CORS_PREFLIGHT_MAX_AGE = 3600

CORS_ALLOWED_ORIGINS = [
    origin.strip().lower()
    for origin in env.str(
        "CORS_ALLOWED_ORIGINS",
        default="http://localhost:3000,http://localhost:5173,http://localhost:8080",
    ).split(",")
    if origin.strip()
]
CORS_ALLOWED_ORIGIN_REGEXES = [
    r"^https://([\w-]+\.)?rwandaheritage\.com$",
    r"^https://([\w-]+\.)?heritageguard\.rw$",
]

CORS_ALLOW_HEADERS = (
    "accept",
    "authorization",
    "content-type",
    "accept-language",
    "x-request-id",
    "x-requested-with",
)
CORS_EXPOSE_HEADERS = ("x-request-id", "retry-after")
