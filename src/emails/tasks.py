import logging
from smtplib import SMTPException
from typing import Any

from celery import shared_task

from src.emails.services import email_send

log = logging.getLogger(__name__)


@shared_task(name="emails.send_email", autoretry_for=(SMTPException, ConnectionError), retry_backoff=True, max_retries=3)
def send_email_task(payload: dict[str, Any]) -> bool:
    """Deliver a queued account email (welcome, lockout notice). Keys match `email_send`."""
    log.info("Sending email %r to %s recipient(s)", payload.get("subject"), len(payload.get("to") or []))
    return email_send(**payload)
