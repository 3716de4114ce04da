import os

from celery import Celery

SETTINGS_BY_ENV = {
    "production": "config.django.production",
    "test": "config.django.test",
}


def settings_module_for(django_env: str) -> str:
    """Same DJANGO_ENV switch as manage.py and the WSGI/ASGI entry points."""
    return SETTINGS_BY_ENV.get(django_env, "config.django.base")


os.environ.setdefault("DJANGO_SETTINGS_MODULE", settings_module_for(os.environ.get("DJANGO_ENV", "development")))

app = Celery("heritage_guard")

# CELERY_* keys in the Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
