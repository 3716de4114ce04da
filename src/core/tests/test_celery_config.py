import pytest

from config.celery import settings_module_for


@pytest.mark.parametrize(
    "django_env,module",
    [
        ("production", "config.django.production"),
        ("test", "config.django.test"),
        ("development", "config.django.base"),
        ("", "config.django.base"),
    ],
)
def test_worker_settings_follow_django_env(django_env, module):
    assert settings_module_for(django_env) == module
