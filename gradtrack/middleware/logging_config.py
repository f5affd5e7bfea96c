"""
Logging setup for GradTrack.

Every record passing through the root handler is stamped with the current
request id and authenticated user (when there is a request), so service
log lines such as "Task updated id=4 user=2" can be joined to the timing
line of the request that produced them.

Output format follows the environment unless LOG_FORMAT overrides it:
JSON lines in production, coloured single lines everywhere else.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context

# Attributes serialized into JSON lines when a record carries them
CONTEXT_FIELDS = ("request_id", "user_id", "method", "path", "status", "duration_ms", "remote_addr")

_NOISY_LOGGERS = ("urllib3", "werkzeug", "sqlalchemy.engine")


class RequestContextFilter(logging.Filter):
    """Fill in request_id / user_id from ``flask.g`` unless the caller passed them."""

    def filter(self, record):
        if has_request_context():
            if getattr(record, "request_id", None) is None:
                record.request_id = g.get("request_id")
            if getattr(record, "user_id", None) is None:
                record.user_id = g.get("jwt_user_id")
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: message [12ms] user=3 req=ab12``, coloured by level."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        color = self.LEVEL_COLORS.get(record.levelno, "")
        parts = [f"{color}{stamp} {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"]

        duration = getattr(record, "duration_ms", None)
        if duration is not None:
            parts.append(f"[{duration:.0f}ms]")
        user_id = getattr(record, "user_id", None)
        if user_id is not None:
            parts.append(f"user={user_id}")
        request_id = getattr(record, "request_id", None)
        if request_id:
            parts.append(f"req={request_id}")

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _resolve_level(app):
    if app.testing:
        default = "WARNING"
    elif app.debug:
        default = "DEBUG"
    else:
        default = "INFO"
    name = (app.config.get("LOG_LEVEL") or os.getenv("LOG_LEVEL") or default).upper()
    return name, getattr(logging, name, logging.INFO)


def configure_logging(app):
    """Install one stderr handler on the root logger for this app.

    Re-running (as the test app factory does) replaces the handler rather
    than stacking another one.
    """
    level_name, level = _resolve_level(app)
    fmt = (app.config.get("LOG_FORMAT") or "").lower()
    if fmt not in ("json", "readable"):
        fmt = "readable" if (app.debug or app.testing) else "json"

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if fmt == "json" else ReadableFormatter())
    handler.addFilter(RequestContextFilter())
    handler.setLevel(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    app.logger.setLevel(level)

    if not app.testing:
        app.logger.info("Logging configured: level=%s format=%s", level_name, fmt)
