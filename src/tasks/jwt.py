import logging

from celery import shared_task
from django.core.management import call_command
from django.utils import timezone
from ninja_jwt.token_blacklist.models import OutstandingToken

log = logging.getLogger(__name__)


@shared_task(name="jwt.flush_expired_tokens")
def flush_expired_tokens() -> int:
    """Drop refresh tokens past their expiry together with their blacklist rows."""
    expired = OutstandingToken.objects.filter(expires_at__lte=timezone.now()).count()
    call_command("flushexpiredtokens")
    log.info("Flushed %s expired refresh tokens", expired)
    return expired
