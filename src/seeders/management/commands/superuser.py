import os
from getpass import getpass

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from src.users.models import User, UserRole, UserStatus


class Command(BaseCommand):
    help = "Create or update the platform system administrator."

    def add_arguments(self, parser):
        parser.add_argument("--email", dest="email", help="Administrator email")
        parser.add_argument("--username", dest="username", help="Administrator username")
        parser.add_argument("--password", dest="password", help="Administrator password")
        parser.add_argument("--first-name", dest="first_name", default="")
        parser.add_argument("--last-name", dest="last_name", default="")

    @transaction.atomic
    def handle(self, *args, **options):
        email = options.get("email") or os.getenv("ADMIN_USER_EMAIL")
        password = options.get("password") or os.getenv("ADMIN_USER_PASSWORD")
        username = options.get("username") or os.getenv("ADMIN_USER_NAME", "admin")
        first_name = options.get("first_name") or os.getenv("ADMIN_USER_FIRST_NAME", "System")
        last_name = options.get("last_name") or os.getenv("ADMIN_USER_LAST_NAME", "Administrator")

        if not email:
            raise CommandError("Provide --email or set ADMIN_USER_EMAIL.")

        if not password:
            self.stdout.write(self.style.WARNING("No password provided."))
            password = getpass("Enter administrator password: ").strip()
            if not password:
                raise CommandError("Password is required.")

        other_admin = (
            User.objects.filter(role=UserRole.SYSTEM_ADMINISTRATOR)
            .exclude(email__iexact=email)
            .first()
        )
        if other_admin:
            raise CommandError(f"A system administrator already exists: {other_admin.email}")

        existing = User.objects.filter(email__iexact=email).first()
        if existing:
            existing.is_superuser = True
            existing.is_staff = True
            existing.role = UserRole.SYSTEM_ADMINISTRATOR
            existing.status = UserStatus.ACTIVE
            existing.first_name = first_name
            existing.last_name = last_name
            existing.reset_failed_logins()
            existing.set_password(password)
            existing.save()
            self.stdout.write(self.style.SUCCESS(f"Updated existing administrator: {email}"))
            return

        user = User.objects.create_superuser(
            email=email,
            password=password,
            username=username,
            first_name=first_name,
            last_name=last_name,
        )
        self.stdout.write(self.style.SUCCESS(f"Created administrator: {user.email}"))
