from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import F
from django.utils import timezone

from src.common.models import BaseModel


from django.contrib.auth.models import (
    AbstractBaseUser,
    PermissionsMixin,
    BaseUserManager,
)


class UserRole(models.TextChoices):
    SYSTEM_ADMINISTRATOR = "SYSTEM_ADMINISTRATOR", "System Administrator"
    HERITAGE_MANAGER = "HERITAGE_MANAGER", "Heritage Manager"
    CONTENT_MANAGER = "CONTENT_MANAGER", "Content Manager"
    COMMUNITY_MEMBER = "COMMUNITY_MEMBER", "Community Member"
    GUEST = "GUEST", "Guest"


class UserStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    SUSPENDED = "SUSPENDED", "Suspended"
    DISABLED = "DISABLED", "Disabled"
    DELETED = "DELETED", "Deleted"


# Allowed status moves. DISABLED is permanent apart from deletion.
USER_STATUS_TRANSITIONS = {
    UserStatus.ACTIVE: {UserStatus.SUSPENDED, UserStatus.DISABLED, UserStatus.DELETED},
    UserStatus.SUSPENDED: {UserStatus.ACTIVE, UserStatus.DISABLED, UserStatus.DELETED},
    UserStatus.DISABLED: {UserStatus.DELETED},
    UserStatus.DELETED: {UserStatus.ACTIVE},
}


def user_status_can_transition(current: str, target: str) -> bool:
    return target in USER_STATUS_TRANSITIONS.get(current, set())


class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")

        email = self.normalize_email(email).lower()
        extra_fields.setdefault("username", email.split("@")[0])
        extra_fields.setdefault("status", UserStatus.ACTIVE)
        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)

        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.update(
            {
                "is_staff": True,
                "is_superuser": True,
                "status": UserStatus.ACTIVE,
                "role": UserRole.SYSTEM_ADMINISTRATOR,
            }
        )
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, BaseModel, PermissionsMixin):
    """Platform account. Exactly one role per user."""

    # Identification
    username = models.CharField(max_length=50, unique=True)
    email = models.EmailField(unique=True, db_index=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)

    # Role and status
    role = models.CharField(
        max_length=32, choices=UserRole.choices, default=UserRole.COMMUNITY_MEMBER, db_index=True
    )
    status = models.CharField(
        max_length=20, choices=UserStatus.choices, default=UserStatus.ACTIVE, db_index=True
    )
    status_reason = models.TextField(blank=True)
    status_changed_by = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    status_changed_at = models.DateTimeField(null=True, blank=True)

    # Preferences
    preferred_language = models.CharField(max_length=5, default="en")
    additional_languages = models.JSONField(default=list, blank=True)
    email_notifications = models.BooleanField(default=True)
    push_notifications = models.BooleanField(default=True)
    last_profile_update = models.DateTimeField(null=True, blank=True)

    # Account lockout
    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_users",
    )

    # Django required
    is_staff = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        db_table = "users"
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} <{self.email}> [{self.role}]"

    @property
    def is_system_admin(self) -> bool:
        return self.role == UserRole.SYSTEM_ADMINISTRATOR

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def register_failed_login(self) -> bool:
        """
        Count a failed attempt and lock the account once the threshold is hit.
        Returns True when it locks.

        The counter is incremented in the database so concurrent failures are all counted.
        """
        users = type(self).objects.filter(pk=self.pk)
        users.update(failed_login_attempts=F("failed_login_attempts") + 1, updated_at=timezone.now())
        self.refresh_from_db(fields=["failed_login_attempts", "locked_until", "updated_at"])
        if self.failed_login_attempts < settings.AUTH_MAX_FAILED_LOGINS:
            return False
        self.locked_until = timezone.now() + timedelta(minutes=settings.AUTH_LOCKOUT_MINUTES)
        users.update(locked_until=self.locked_until)
        return True

    def reset_failed_logins(self) -> None:
        self.failed_login_attempts = 0
        self.locked_until = None

    def save(self, *args, **kwargs):
        self.is_active = self.status == UserStatus.ACTIVE
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "status" in update_fields and "is_active" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "is_active"]
        super().save(*args, **kwargs)
