from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.timezone import get_default_timezone_name
from django_celery_beat.models import CrontabSchedule, PeriodicTask

# task_name is the `name=` given to @shared_task

PERIODIC_TASKS = [
    {
        "name": "JWT: flush expired tokens (daily 03:15)",
        "task_name": "jwt.flush_expired_tokens",
        "cron": {"minute": "15", "hour": "3", "day_of_week": "*", "day_of_month": "*", "month_of_year": "*"},
        "enabled": True,
    },
    {
        "name": "Notifications: purge old read notifications (daily 04:00)",
        "task_name": "notifications.purge_read",
        "cron": {"minute": "0", "hour": "4", "day_of_week": "*", "day_of_month": "*", "month_of_year": "*"},
        "enabled": True,
    },
]


class Command(BaseCommand):
    help = "Setup Celery Beat periodic tasks"

    @transaction.atomic
    def handle(self, *args, **kwargs):
        tz = get_default_timezone_name()
        for entry in PERIODIC_TASKS:
            cron, _ = CrontabSchedule.objects.get_or_create(timezone=tz, **entry["cron"])
            PeriodicTask.objects.update_or_create(
                name=entry["name"],
                defaults={"task": entry["task_name"], "crontab": cron, "enabled": entry.get("enabled", True)},
            )
            self.stdout.write(self.style.SUCCESS(f"Scheduled: {entry['name']}"))
