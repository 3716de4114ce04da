import json
import os

import hvac
from django.core.management.base import BaseCommand, CommandError

from config.env import OPENBAO_ADDR, OPENBAO_KV_MOUNT, OPENBAO_KV_PATH, bao_read_kv

DEFAULT_REQUIRED = ("DJANGO_SECRET_KEY", "DATABASE_URL")


def _mask(val) -> str:
    if val is None:
        return "None"
    val = str(val)
    if len(val) <= 4:
        return "*" * len(val)
    return val[:2] + "*" * (len(val) - 4) + val[-2:]


class Command(BaseCommand):
    help = "Report where each required secret resolves from (environment or OpenBao). Fails when one is missing."

    def add_arguments(self, parser):
        parser.add_argument(
            "--required",
            nargs="+",
            default=[k for k in os.getenv("REQUIRED_SECRETS", ",".join(DEFAULT_REQUIRED)).split(",") if k],
            help="Keys that must resolve, e.g. --required DJANGO_SECRET_KEY DATABASE_URL",
        )
        parser.add_argument("--path", default=None, help=f"KV v2 path (default: {OPENBAO_KV_PATH}).")
        parser.add_argument("--json", action="store_true", help="Print a JSON report.")

    def handle(self, *args, **opts):
        kv_error = None
        try:
            kv_data = bao_read_kv(opts["path"])
        except (hvac.exceptions.VaultError, ConnectionError, OSError) as exc:
            kv_data, kv_error = {}, str(exc)

        report, missing = [], []
        for key in (k.strip() for k in opts["required"]):
            if key in os.environ:
                source = "ENV"
                value = os.environ[key]
            elif key in kv_data:
                source = "OPENBAO"
                value = kv_data[key]
            else:
                source = "MISSING"
                value = None
                missing.append(key)
            report.append({"key": key, "source": source, "value_masked": _mask(value)})

        if opts["json"]:
            self.stdout.write(json.dumps({
                "openbao": {"addr": OPENBAO_ADDR, "mount": OPENBAO_KV_MOUNT,
                            "path": opts["path"] or OPENBAO_KV_PATH, "error": kv_error},
                "report": report,
                "missing": missing,
                "ok": not missing,
            }, indent=2))
        else:
            self.stdout.write(f"OpenBao: addr={OPENBAO_ADDR} mount={OPENBAO_KV_MOUNT} "
                              f"path={opts['path'] or OPENBAO_KV_PATH}")
            if kv_error:
                self.stderr.write(self.style.WARNING(f"OpenBao read failed: {kv_error}"))
            for row in report:
                self.stdout.write(f"  {row['key']:>24}  {row['source']:<8}  {row['value_masked']}")

        if missing:
            raise CommandError(f"Missing required secrets: {', '.join(missing)}")
        self.stdout.write(self.style.SUCCESS("All required secrets resolve"))
