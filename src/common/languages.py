from django.conf import settings

from src.core.exceptions import DomainValidationError

LANGUAGE_NAMES = {
    "en": "English",
    "rw": "Kinyarwanda",
    "fr": "French",
}


def supported_languages() -> tuple[str, ...]:
    return tuple(settings.SUPPORTED_LANGUAGES)


def default_language() -> str:
    return settings.DEFAULT_CONTENT_LANGUAGE


def is_supported_language(code: str | None) -> bool:
    return bool(code) and code in supported_languages()


def normalize_language(code: str | None, *, field: str = "language") -> str:
    """Lower-case and validate a language code; empty means the default language."""
    if not code:
        return default_language()
    value = code.strip().lower()
    if value not in supported_languages():
        raise DomainValidationError(
            message=f"Unsupported language: {code}",
            code="UNSUPPORTED_LANGUAGE",
            errors={field: [f"must be one of {list(supported_languages())}"]},
        )
    return value


def validate_localized(value: dict[str, str] | None, *, field: str, required: bool = True) -> dict[str, str]:
    """
    Validate a per-language text map such as {"en": "...", "rw": "..."}.
    The default language must be present when `required` is set.
    """
    value = value or {}
    unknown = [k for k in value if k not in supported_languages()]
    if unknown:
        raise DomainValidationError(
            message=f"Unsupported language keys in {field}",
            code="UNSUPPORTED_LANGUAGE",
            errors={field: [f"unsupported: {sorted(unknown)}"]},
        )
    if required and not (value.get(default_language()) or "").strip():
        raise DomainValidationError(
            message=f"{field} is required in '{default_language()}'",
            code="VALIDATION_ERROR",
            errors={field: [f"'{default_language()}' text is required"]},
        )
    return value


def localized_text(value: dict[str, str] | None, language: str | None = None) -> str:
    """Pick a language from a text map, falling back to the default language."""
    value = value or {}
    if language and value.get(language):
        return value[language]
    return value.get(default_language()) or next((v for v in value.values() if v), "")


def language_list() -> list[dict]:
    return [
        {"code": code, "name": LANGUAGE_NAMES.get(code, code), "is_default": code == default_language()}
        for code in supported_languages()
    ]
