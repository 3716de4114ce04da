import pytest
from django.db import IntegrityError, transaction

from src.api.exception_handler import _describe_unique_violation
from src.translations.models import Translation
from src.users.models import User


@pytest.mark.parametrize(
    "message,code",
    [
        ("UNIQUE constraint failed: users.username", "USERNAME_TAKEN"),
        ("UNIQUE constraint failed: users.email", "EMAIL_TAKEN"),
        ("UNIQUE constraint failed: translations.content_type, translations.content_id, "
         "translations.field_name, translations.language_code", "TRANSLATION_EXISTS"),
        ("UNIQUE constraint failed: index 'artifact_site_name_unique'", "ARTIFACT_NAME_TAKEN"),
        ("UNIQUE constraint failed: index 'site_manager_active_unique'", "MANAGER_ALREADY_ASSIGNED"),
        ("UNIQUE constraint failed: quizzes.slug", "CONFLICT"),
        ("NOT NULL constraint failed: users.email", "CONFLICT"),
    ],
)
def test_unique_violations_are_named(message, code):
    assert _describe_unique_violation(IntegrityError(message))[0] == code


@pytest.mark.django_db
def test_unexpected_error_returns_internal_error_envelope(client, member, auth, monkeypatch, settings):
    settings.DEBUG = False

    def broken(**kwargs):
        raise RuntimeError("database on fire")

    monkeypatch.setattr("src.heritage_sites.selectors.site_list", broken)
    resp = client.get("/api/heritage-sites/", **auth(member))

    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "INTERNAL_ERROR"
    assert body["message"] == "Unexpected error"
    assert "database on fire" not in resp.content.decode()
    assert body["request_id"]


@pytest.mark.django_db
def test_duplicate_username_from_database_maps_to_conflict(client, member, monkeypatch):
    def racing_register(**kwargs):
        with transaction.atomic():
            User.objects.create(username=member.username, email="late@heritage.test")

    monkeypatch.setattr("src.auth.services.auth_register", racing_register)
    resp = client.post("/api/auth/register",
                       {"username": "latecomer", "email": "late@heritage.test", "password": "Kigali#Mu5eum"},
                       content_type="application/json")

    assert resp.status_code == 409
    assert resp.json()["code"] == "USERNAME_TAKEN"
    assert resp.json()["errors"] == {"username": ["already taken"]}


@pytest.mark.django_db
def test_duplicate_email_from_database_maps_to_conflict(client, member, monkeypatch):
    def racing_register(**kwargs):
        with transaction.atomic():
            User.objects.create(username="someone-else", email=member.email)

    monkeypatch.setattr("src.auth.services.auth_register", racing_register)
    resp = client.post("/api/auth/register",
                       {"username": "someone", "email": "fresh@heritage.test", "password": "Kigali#Mu5eum"},
                       content_type="application/json")

    assert resp.status_code == 409
    assert resp.json()["code"] == "EMAIL_TAKEN"


@pytest.mark.django_db
def test_duplicate_translation_from_database_maps_to_conflict(client, content_manager, auth, monkeypatch):
    existing = Translation.objects.create(content_type="UI_ELEMENT", content_id="nav.home", field_name="label",
                                          language_code="rw", translated_text="Ahabanza")

    def racing_save(**kwargs):
        with transaction.atomic():
            Translation.objects.create(content_type=existing.content_type, content_id=existing.content_id,
                                       field_name=existing.field_name, language_code=existing.language_code,
                                       translated_text="Ahabanza")

    monkeypatch.setattr("src.translations.services.translation_save", racing_save)
    resp = client.post("/api/translations/",
                       {"content_type": "ui_element", "content_id": "nav.home", "language_code": "rw",
                        "field_name": "label", "translated_text": "Ahabanza"},
                       content_type="application/json", **auth(content_manager))

    assert resp.status_code == 409
    assert resp.json()["code"] == "TRANSLATION_EXISTS"
