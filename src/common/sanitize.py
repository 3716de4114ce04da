import re

from django.utils.html import strip_tags

_SCRIPT_SCHEMES = re.compile(r"(?i)(javascript:|vbscript:)")
_EVENT_HANDLERS = re.compile(r"(?i)\bon(load|error|click|mouseover|focus|blur)\s*=")


def sanitize_text(value: str | None) -> str | None:
    """Strip markup and script vectors from free text before it is stored."""
    if value is None:
        return None
    cleaned = strip_tags(value)
    cleaned = _SCRIPT_SCHEMES.sub("", cleaned)
    cleaned = _EVENT_HANDLERS.sub("", cleaned)
    return cleaned.strip()


def sanitize_localized(value: dict[str, str] | None) -> dict[str, str]:
    if not value:
        return {}
    return {lang: sanitize_text(text) or "" for lang, text in value.items()}
