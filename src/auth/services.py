import logging
import re

from django.conf import settings
from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.db import transaction
from ninja_jwt.exceptions import TokenError
from ninja_jwt.settings import api_settings
from ninja_jwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from ninja_jwt.tokens import RefreshToken

from src.auditaction.models import AuditAction, AuditCategory, Severity
from src.auditaction.services import audit_action_create
from src.common.languages import normalize_language
from src.common.sanitize import sanitize_text
from src.core.exceptions import (
    AccountLockedError,
    AuthenticationError,
    DomainConflictError,
    PermissionDeniedError,
)
from src.emails.services import email_queue
from src.emails.templates import account_locked_email, welcome_email
from src.users import selectors as user_selectors
from src.users.models import User, UserRole, UserStatus
from src.users.validators import validate_password_policy

log = logging.getLogger(__name__)

TOKEN_TYPE = "Bearer"


def _is_admin_email(email: str) -> bool:
    return bool(re.match(settings.ADMIN_EMAIL_PATTERN, email.lower()))


def tokens_for_user(user: User) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "access_token": str(refresh.access_token),
        "refresh_token": str(refresh),
        "token_type": TOKEN_TYPE,
    }


def revoke_all_refresh_tokens(*, user: User) -> int:
    """Blacklist every outstanding refresh token of the user (idempotent)."""
    revoked = 0
    for token in OutstandingToken.objects.filter(user=user):
        _, created = BlacklistedToken.objects.get_or_create(token=token)
        revoked += int(created)
    return revoked


def _handle_failed_login(*, user: User | None, identifier: str, request=None) -> None:
    user_login_failed.send(sender=__name__, credentials={"username": identifier}, request=request)
    if user is None:
        return

    locked = user.register_failed_login()
    if not locked:
        return

    log.warning("Account %s locked after %s failed logins", user.id, user.failed_login_attempts)
    audit_action_create(
        user=user,
        category=AuditCategory.AUTH,
        action=AuditAction.AUTH_ACCOUNT_LOCKED,
        severity=Severity.WARNING,
        target_type="user",
        target_id=str(user.id),
        details={"failed_attempts": user.failed_login_attempts, "locked_until": user.locked_until},
        request=request,
    )
    subject, html = account_locked_email(name=user.full_name or user.username,
                                         minutes=settings.AUTH_LOCKOUT_MINUTES)
    email_queue(to=[user.email], subject=subject, html=html)


def auth_login(*, identifier: str, password: str, request=None) -> dict:
    """
    Authenticate by username or email and issue a token pair.

    Not wrapped in a transaction: the failed-attempt counter must persist even though
    the call ends with an exception.
    """
    user = user_selectors.user_get_by_login(identifier=identifier)

    if user is not None and user.locked_until and not user.is_locked:
        # lock window elapsed
        user.reset_failed_logins()
        user.save(update_fields=["failed_login_attempts", "locked_until", "updated_at"])

    if user is not None and user.is_locked:
        log.info("Login refused for locked account %s", user.id)
        raise AccountLockedError(extra={"locked_until": user.locked_until.isoformat()})

    if user is None:
        # keep response time comparable for unknown accounts
        User().set_password(password)
        _handle_failed_login(user=None, identifier=identifier, request=request)
        raise AuthenticationError(message="Invalid username or password", code="INVALID_CREDENTIALS")

    if not user.check_password(password):
        _handle_failed_login(user=user, identifier=identifier, request=request)
        raise AuthenticationError(message="Invalid username or password", code="INVALID_CREDENTIALS")

    if user.status != UserStatus.ACTIVE:
        raise PermissionDeniedError(message=f"User account is {user.status.lower()}", code="ACCOUNT_INACTIVE")

    user.reset_failed_logins()
    user.save(update_fields=["failed_login_attempts", "locked_until", "updated_at"])
    # updates last_login and records the audit entry
    user_logged_in.send(sender=user.__class__, request=request, user=user)

    return {**tokens_for_user(user), "user": user}


@transaction.atomic
def auth_register(
    *,
    username: str,
    email: str,
    password: str,
    first_name: str = "",
    last_name: str = "",
    preferred_language: str | None = None,
    request=None,
) -> User:
    """
    Self registration. Everyone becomes a community member, except the very first
    account using the administrator email pattern.
    """
    validate_password_policy(password)

    if User.objects.filter(username__iexact=username).exists():
        raise DomainConflictError(message="Username already in use", code="USERNAME_TAKEN",
                                  errors={"username": ["already taken"]})
    if user_selectors.user_get_by_email(email=email):
        raise DomainConflictError(message="Email already in use", code="EMAIL_TAKEN",
                                  errors={"email": ["already taken"]})

    role = UserRole.COMMUNITY_MEMBER
    if _is_admin_email(email):
        if user_selectors.admin_exists():
            log.warning("Admin registration attempted but an administrator already exists: %s", email)
            raise DomainConflictError(
                message="System administrator account already exists. Only one admin is allowed.",
                code="ADMIN_EXISTS",
            )
        role = UserRole.SYSTEM_ADMINISTRATOR
        log.info("First administrator registered: %s", email)

    user = User.objects.create_user(
        email=email,
        password=password,
        username=username,
        first_name=sanitize_text(first_name) or "",
        last_name=sanitize_text(last_name) or "",
        role=role,
        status=UserStatus.ACTIVE,
        preferred_language=normalize_language(preferred_language),
    )

    audit_action_create(
        user=user,
        category=AuditCategory.AUTH,
        action=AuditAction.AUTH_REGISTERED,
        target_type="user",
        target_id=str(user.id),
        details={"role": role},
        request=request,
    )
    subject, html = welcome_email(name=user.full_name or user.username)
    email_queue(to=[user.email], subject=subject, html=html)
    return user


@transaction.atomic
def auth_refresh(*, refresh: str, request=None) -> dict:
    """Rotate a refresh token. The presented token is blacklisted."""
    try:
        token = RefreshToken(refresh)
    except TokenError as exc:
        raise AuthenticationError(message=str(exc), code="INVALID_REFRESH_TOKEN")

    user_id = token.payload.get(api_settings.USER_ID_CLAIM)
    user = User.objects.filter(id=user_id).first()
    if user is None or user.status != UserStatus.ACTIVE or user.is_locked:
        raise AuthenticationError(message="User account is not active", code="ACCOUNT_INACTIVE")

    token.blacklist()
    audit_action_create(
        user=user,
        category=AuditCategory.AUTH,
        action=AuditAction.AUTH_TOKEN_REFRESHED,
        target_type="user",
        target_id=str(user.id),
        request=request,
    )
    return tokens_for_user(user)


@transaction.atomic
def auth_logout(*, user: User, refresh: str = "", all_sessions: bool = False, request=None) -> None:
    """Revoke one refresh token (must belong to the caller) or every session of the caller."""
    if all_sessions:
        revoke_all_refresh_tokens(user=user)
    else:
        try:
            token = RefreshToken(refresh)
        except TokenError as exc:
            raise AuthenticationError(message=str(exc), code="INVALID_REFRESH_TOKEN")
        if str(token.payload.get(api_settings.USER_ID_CLAIM, "")) != str(user.id):
            raise PermissionDeniedError(message="Refresh token belongs to another user")
        token.blacklist()

    user_logged_out.send(sender=user.__class__, request=request, user=user, all_sessions=all_sessions)
