import pytest
from django.core import mail

from src.auth.services import auth_register
from src.emails.services import email_queue, email_send
from src.emails.templates import account_locked_email, welcome_email


def test_templates_escape_names():
    subject, html = welcome_email(name="<b>Mutesi</b>")
    assert subject == "Welcome to Heritage Guard"
    assert "&lt;b&gt;Mutesi&lt;/b&gt;" in html

    subject, html = account_locked_email(name="Mutesi", minutes=30)
    assert "locked" in subject
    assert "30" in html


def test_email_send_builds_text_fallback(settings):
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    assert email_send(to=["a@heritage.test", ""], subject="Hi", html="<p>Hello</p>") is True

    message = mail.outbox[-1]
    assert message.to == ["a@heritage.test"]
    assert message.body == "Hello"
    assert message.alternatives[0][1] == "text/html"


def test_email_send_without_recipients():
    assert email_send(to=[], subject="Hi", html="<p>x</p>") is False


@pytest.mark.django_db
def test_queue_sends_after_commit(django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        email_queue(to=["b@heritage.test"], subject="Queued", html="<p>later</p>")
    assert mail.outbox[-1].subject == "Queued"


@pytest.mark.django_db
def test_registration_sends_welcome_email(django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        auth_register(username="keza", email="keza@heritage.test", password="Herit@ge2024!")
    assert mail.outbox[-1].to == ["keza@heritage.test"]
    assert "Welcome" in mail.outbox[-1].subject
