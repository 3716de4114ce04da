import logging
from typing import Any, Iterable

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.db import transaction
from django.utils.html import strip_tags

log = logging.getLogger(__name__)


def email_send(
    *,
    to: Iterable[str],
    subject: str,
    html: str,
    text: str | None = None,
    cc: Iterable[str] | None = None,
    bcc: Iterable[str] | None = None,
    reply_to: Iterable[str] | None = None,
    extra_headers: dict[str, str] | None = None,
) -> bool:
    """Send one multipart (text + html) email through the configured backend."""
    recipients = [addr for addr in (to or []) if addr]
    if not recipients:
        log.info("email_send skipped: no recipients for %r", subject)
        return False

    message = EmailMultiAlternatives(
        subject=subject,
        body=text or strip_tags(html),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=recipients,
        cc=list(cc or []),
        bcc=list(bcc or []),
        reply_to=list(reply_to or []),
        headers=extra_headers or {},
    )
    message.attach_alternative(html, "text/html")
    sent = message.send(fail_silently=False)
    log.info("Email %r sent to %d recipient(s)", subject, len(recipients))
    return bool(sent)


def email_queue(*, to: Iterable[str], subject: str, html: str, text: str | None = None) -> None:
    """Hand the email to Celery once the surrounding transaction commits."""
    from src.emails.tasks import send_email_task

    payload: dict[str, Any] = {"to": list(to), "subject": subject, "html": html, "text": text}
    transaction.on_commit(lambda: send_email_task.delay(payload))
