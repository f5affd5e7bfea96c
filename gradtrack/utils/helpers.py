"""Shared utility functions for services and blueprints.

parse_datetime:      ISO date/datetime → naive UTC datetime (raises ValueError)
parse_bool:          query-string booleans ("true"/"false")
config_window:       day-count setting from app config as a timedelta
commit_or_rollback:  commit the session, rolling back before re-raising
"""
import logging
from datetime import date, datetime, timedelta, timezone

from flask import current_app, has_app_context

from gradtrack.models import db

logger = logging.getLogger(__name__)


def parse_datetime(value):
    """Parse an ISO-8601 date or datetime into a naive UTC datetime.

    - ``2026-12-01``               → midnight of that day
    - ``2026-12-01T10:30:00``      → taken as UTC
    - ``2026-12-01T10:30:00+02:00`` / ``...Z`` → converted to UTC

    Returns None for empty input; raises ValueError on anything unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError("Invalid date format. Use ISO-8601 (YYYY-MM-DD).") from exc
    else:
        raise ValueError("Invalid date format. Use ISO-8601 (YYYY-MM-DD).")

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def parse_bool(value):
    """Parse "true"/"false" query values. Returns None when absent or unrecognised."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    return None


def config_window(name, default):
    """Read a window size in days from app config; the default applies outside an app context."""
    if has_app_context():
        return timedelta(days=current_app.config.get(name, default))
    return timedelta(days=default)


# ── Database commit helper ───────────────────────────────────────────────────

def commit_or_rollback():
    """Commit the current SQLAlchemy session; roll back and re-raise on failure."""
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Database error on commit")
        raise
