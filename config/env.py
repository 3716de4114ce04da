import logging
from functools import lru_cache

import environ
import hvac
from django.core.exceptions import ImproperlyConfigured

log = logging.getLogger(__name__)

env = environ.Env()

BASE_DIR = environ.Path(__file__) - 2
APPS_DIR = BASE_DIR.path("src")


def env_to_enum(enum_cls, value):
    for x in enum_cls:
        if x.value == value:
            return x

    raise ImproperlyConfigured(
        f"Env value {repr(value)} could not be found in {repr(enum_cls)}"
    )


# Secret store used in production. Token auth for local use, AppRole for deployments.
OPENBAO_ADDR = env("OPENBAO_ADDR", default="http://127.0.0.1:8200")
OPENBAO_TOKEN = env("OPENBAO_TOKEN", default="")
OPENBAO_ROLE_ID = env("OPENBAO_ROLE_ID", default="")
OPENBAO_SECRET_ID = env("OPENBAO_SECRET_ID", default="")
OPENBAO_KV_MOUNT = env("OPENBAO_KV_MOUNT", default="secret")
OPENBAO_KV_PATH = env("OPENBAO_KV_PATH", default="heritage-guard")


def _bao_client() -> hvac.Client:
    client = hvac.Client(url=OPENBAO_ADDR, timeout=5)
    if OPENBAO_TOKEN:
        client.token = OPENBAO_TOKEN
    elif OPENBAO_ROLE_ID and OPENBAO_SECRET_ID:
        resp = client.auth.approle.login(role_id=OPENBAO_ROLE_ID, secret_id=OPENBAO_SECRET_ID)
        client.token = resp["auth"]["client_token"]
    return client


@lru_cache(maxsize=32)
def bao_read_kv(path: str | None = None) -> dict:
    """
    Read the KV v2 secret at {OPENBAO_KV_MOUNT}/{path or OPENBAO_KV_PATH}.
    Cached per process.
    """
    resp = _bao_client().secrets.kv.v2.read_secret_version(
        mount_point=OPENBAO_KV_MOUNT, path=path or OPENBAO_KV_PATH
    )
    return resp["data"]["data"] or {}


def env_get(name: str, default=None, *, kv_path: str | None = None, prefer_env: bool = True):
    """
    Resolve a setting from the environment (or .env), then OpenBao, then `default`.
    """
    if prefer_env:
        val = env(name, default=None)
        if val is not None:
            return val
    try:
        data = bao_read_kv(kv_path)
    except (hvac.exceptions.VaultError, ConnectionError, OSError) as exc:
        log.warning("env_get: OpenBao lookup failed for %s: %s (using default)", name, exc)
        return default
    return data.get(name, default)
