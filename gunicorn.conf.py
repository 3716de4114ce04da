import logging.config
import multiprocessing
import os
import re

import structlog

workers = min(multiprocessing.cpu_count() * 2 + 1, int(os.environ.get("GUNICORN_MAX_WORKERS", 8)))
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
wsgi_app = "config.wsgi:application"
worker_class = "sync"
preload_app = True

timeout = int(os.environ.get("GUNICORN_TIMEOUT", 60))
graceful_timeout = 30
keepalive = 5
# recycle workers to bound memory growth from large JSON payloads
max_requests = 1000
max_requests_jitter = 50

loglevel = os.environ.get("LOG_LEVEL", "info").lower()
errorlog = "-"
accesslog = "-"
# 10.0.0.7 - - [27/Dec/2025:17:30:00 +0000] "GET /api/heritage-sites/ HTTP/1.1" 200 512 "-" "curl/8.0" 0.012
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(L)s'

ACCESS_LINE = re.compile(
    r'(?P<client>\S+) \S+ (?P<user>\S+) \[(?P<time>[^\]]+)\] '
    r'"(?P<method>\S+) (?P<path>\S+) (?P<protocol>[^"]+)" '
    r'(?P<status>\d{3}) (?P<size>\S+) "(?P<referer>[^"]*)" "(?P<agent>[^"]*)" (?P<duration>[\d.]+)\s*$'
)


def _dash_to_none(value):
    return None if value in ("-", "") else value


def parse_access_line(logger, name, event_dict):
    """Turn a gunicorn.access line into fields; unparseable lines pass through unchanged."""
    if event_dict.get("logger") != "gunicorn.access":
        return event_dict

    match = ACCESS_LINE.match(str(event_dict.get("event", "")))
    if not match:
        return event_dict

    fields = match.groupdict()
    event_dict.update(
        event="http.request",
        client=fields["client"],
        user=_dash_to_none(fields["user"]),
        method=fields["method"],
        path=fields["path"],
        protocol=fields["protocol"],
        status=int(fields["status"]),
        size=int(fields["size"]) if fields["size"].isdigit() else 0,
        referer=_dash_to_none(fields["referer"]),
        agent=fields["agent"],
        duration_s=float(fields["duration"]),
    )
    return event_dict


def tag_server_events(logger, name, event_dict):
    if event_dict.get("logger") != "gunicorn.error" or not isinstance(event_dict.get("event"), str):
        return event_dict

    text = event_dict["event"]
    lowered = text.lower()
    if lowered.startswith(("starting", "listening", "using", "booting")):
        event_dict.update(event="server.booting", message=text)
    elif lowered.startswith("handling signal"):
        event_dict.update(event="server.signal", message=text)
    return event_dict


def _logger(level="INFO"):
    return {"level": level, "handlers": ["default"], "propagate": False}


logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json_formatter": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": structlog.processors.JSONRenderer(),
                "foreign_pre_chain": [
                    structlog.stdlib.add_log_level,
                    structlog.stdlib.add_logger_name,
                    structlog.processors.TimeStamper(fmt="iso", utc=True),
                    parse_access_line,
                    tag_server_events,
                ],
            },
        },
        "handlers": {
            "default": {"class": "logging.StreamHandler", "formatter": "json_formatter"},
        },
        "root": {"level": "INFO", "handlers": ["default"]},
        "loggers": {
            "gunicorn.error": _logger(),
            "gunicorn.access": _logger(),
            "django_structlog": _logger(),
        },
    }
)
