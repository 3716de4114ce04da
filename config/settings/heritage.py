from config.env import env

# Requests per client IP per minute
RATE_LIMIT_ENABLED = env.bool("RATE_LIMIT_ENABLED", default=True)
RATE_LIMITS = {
    "login": env.int("RATE_LIMIT_LOGIN", default=20),
    "register": env.int("RATE_LIMIT_REGISTER", default=10),
    "upload": env.int("RATE_LIMIT_UPLOAD", default=50),
    "api": env.int("RATE_LIMIT_API", default=1000),
}

AUTH_MAX_FAILED_LOGINS = env.int("AUTH_MAX_FAILED_LOGINS", default=5)
AUTH_LOCKOUT_MINUTES = env.int("AUTH_LOCKOUT_MINUTES", default=30)

# The first account registering with a matching email becomes the system administrator
ADMIN_EMAIL_PATTERN = env.str("ADMIN_EMAIL_PATTERN", default=r"^admin\.admin@.*$")

SUPPORTED_LANGUAGES = ("en", "rw", "fr")
DEFAULT_CONTENT_LANGUAGE = "en"

NOTIFICATION_RETENTION_DAYS = env.int("NOTIFICATION_RETENTION_DAYS", default=30)
FORUM_MIN_POST_INTERVAL_SECONDS = env.int("FORUM_MIN_POST_INTERVAL_SECONDS", default=10)
# Keyword, spam and repetition screening of new forum posts
FORUM_AUTO_MODERATION_ENABLED = env.bool("FORUM_AUTO_MODERATION_ENABLED", default=True)
