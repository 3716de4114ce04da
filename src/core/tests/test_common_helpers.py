import uuid

import pytest
from django.db import connections

from src.common.languages import localized_text, normalize_language, validate_localized
from src.common.sanitize import sanitize_localized, sanitize_text
from src.common.search import filter_by_tag
from src.common.utils import validate_uuid
from src.core.exceptions import DomainValidationError
from src.quizzes.models import Quiz


def test_sanitize_text_strips_markup_and_script_vectors():
    assert sanitize_text("<b>Nyanza</b> palace") == "Nyanza palace"
    assert sanitize_text("<script>alert(1)</script>hi") == "alert(1)hi"
    assert "javascript:" not in sanitize_text("javascript:void(0)")
    assert sanitize_text(None) is None


def test_sanitize_localized_keeps_keys():
    assert sanitize_localized({"en": "<i>Drum</i>", "rw": "Ingoma"}) == {"en": "Drum", "rw": "Ingoma"}
    assert sanitize_localized(None) == {}


def test_validate_localized_requires_default_language():
    assert validate_localized({"en": "King's Palace"}, field="name") == {"en": "King's Palace"}
    with pytest.raises(DomainValidationError):
        validate_localized({"rw": "Ingoro"}, field="name")
    assert validate_localized({}, field="description", required=False) == {}


def test_validate_localized_rejects_unknown_language():
    with pytest.raises(DomainValidationError) as exc:
        validate_localized({"en": "x", "de": "y"}, field="name")
    assert exc.value.code == "UNSUPPORTED_LANGUAGE"


def test_localized_text_falls_back_to_default():
    value = {"en": "Museum", "fr": "Musée"}
    assert localized_text(value, "fr") == "Musée"
    assert localized_text(value, "rw") == "Museum"
    assert localized_text(None) == ""


def test_normalize_language():
    assert normalize_language(None) == "en"
    assert normalize_language(" RW ") == "rw"
    with pytest.raises(DomainValidationError):
        normalize_language("es")


def test_validate_uuid():
    value = uuid.uuid4()
    assert validate_uuid(str(value)) == value
    with pytest.raises(DomainValidationError) as exc:
        validate_uuid("not-a-uuid", field="user_id")
    assert exc.value.errors == {"user_id": ["must be a valid UUID"]}


@pytest.mark.django_db
def test_filter_by_tag_matches_whole_tags():
    royal = Quiz.objects.create(title={"en": "Royal"}, tags=["history", "kings"])
    Quiz.objects.create(title={"en": "Dance"}, tags=["intore"])
    Quiz.objects.create(title={"en": "Untagged"})

    assert list(filter_by_tag(Quiz.objects.all(), " KINGS ")) == [royal]
    assert not filter_by_tag(Quiz.objects.all(), "king").exists()


@pytest.mark.django_db
def test_filter_by_tag_uses_json_containment_on_postgres(monkeypatch):
    monkeypatch.setattr(connections["default"], "vendor", "postgresql")
    qs = filter_by_tag(Quiz.objects.all(), "Kings")
    contains = [c for c in qs.query.where.children if getattr(c, "lookup_name", None) == "contains"]
    assert [c.rhs for c in contains] == [["kings"]]
