"""
Deadline service layer.

Besides CRUD this module owns deadline categorisation, the partition the
deadline list and the view layer share (7d and 30d are the configured
THIS_WEEK_WINDOW_DAYS and UPCOMING_WINDOW_DAYS):

    completed: completed flag set (date ignored)
    overdue:   date < now
    thisWeek:  now <= date <= now + 7d
    thisMonth: now + 7d < date <= now + 30d
    upcoming:  date > now + 30d
"""

import logging

from sqlalchemy import func

from gradtrack.models import db
from gradtrack.models.base import utcnow
from gradtrack.models.deadline import DEADLINE_TYPES, Deadline
from gradtrack.services.helpers.scoped_queries import get_scoped
from gradtrack.services.university_service import require_owned_university
from gradtrack.services.validation import PayloadValidator
from gradtrack.utils.helpers import commit_or_rollback, config_window, parse_datetime

logger = logging.getLogger(__name__)

CATEGORY_KEYS = ("overdue", "thisWeek", "thisMonth", "upcoming", "completed")


def validate_deadline(data, *, partial=False) -> dict:
    v = PayloadValidator(data, partial=partial)
    v.string("title", required=True, min_length=1, max_length=200)
    v.enum("type", DEADLINE_TYPES, required=True)
    v.datetime("date", required=True)
    v.boolean("completed", default=False)
    v.integer("universityId", "university_id")
    return v.validate()


def _date_and_flag(item):
    """Read (date, completed) from a Deadline row or its serialized dict."""
    if isinstance(item, dict):
        return parse_datetime(item.get("date")), bool(item.get("completed"))
    return item.date, bool(item.completed)


def _windows():
    return (config_window("THIS_WEEK_WINDOW_DAYS", 7), config_window("UPCOMING_WINDOW_DAYS", 30))


def categorize_deadline(item, now) -> str:
    week, month = _windows()
    when, completed = _date_and_flag(item)
    if completed:
        return "completed"
    if when < now:
        return "overdue"
    if when <= now + week:
        return "thisWeek"
    if when <= now + month:
        return "thisMonth"
    return "upcoming"


def categorize_deadlines(deadlines, now=None) -> dict:
    """Partition deadlines into the five mutually exclusive buckets.

    Input order is preserved inside each bucket.
    """
    now = now or utcnow()
    buckets = {key: [] for key in CATEGORY_KEYS}
    for item in deadlines:
        buckets[categorize_deadline(item, now)].append(item)
    return buckets


def list_deadlines(user_id, *, deadline_type=None, completed=None, university_id=None,
                   upcoming=False, now=None) -> dict:
    now = now or utcnow()
    q = Deadline.query_for_user(user_id)
    if deadline_type:
        q = q.filter(Deadline.type == deadline_type.upper())
    if completed is not None:
        q = q.filter(Deadline.completed.is_(completed))
    if university_id is not None:
        q = q.filter(Deadline.university_id == university_id)
    if upcoming:
        q = q.filter(
            Deadline.completed.is_(False),
            Deadline.date >= now,
            Deadline.date <= now + config_window("UPCOMING_WINDOW_DAYS", 30),
        )
    rows = q.order_by(Deadline.date.asc(), Deadline.created_at.desc(), Deadline.id.desc()).all()

    categorized = categorize_deadlines(rows, now)
    return {
        "deadlines": [d.to_dict() for d in rows],
        "categorizedDeadlines": {
            key: [d.to_dict() for d in items] for key, items in categorized.items()
        },
    }


def get_deadline(user_id, deadline_id) -> dict:
    return get_scoped(Deadline, deadline_id, user_id=user_id).to_dict()


def create_deadline(user_id, data) -> dict:
    cleaned = validate_deadline(data)
    require_owned_university(user_id, cleaned.get("university_id"))

    deadline = Deadline(user_id=user_id, **cleaned)
    db.session.add(deadline)
    commit_or_rollback()
    logger.info("Deadline created id=%s user=%s type=%s", deadline.id, user_id, deadline.type)
    return deadline.to_dict()


def update_deadline(user_id, deadline_id, data) -> dict:
    deadline = get_scoped(Deadline, deadline_id, user_id=user_id)
    cleaned = validate_deadline(data, partial=True)
    if "university_id" in cleaned:
        require_owned_university(user_id, cleaned["university_id"])

    for attr, value in cleaned.items():
        setattr(deadline, attr, value)
    deadline.touch()
    commit_or_rollback()
    logger.info("Deadline updated id=%s user=%s", deadline.id, user_id)
    return deadline.to_dict()


def delete_deadline(user_id, deadline_id) -> None:
    deadline = get_scoped(Deadline, deadline_id, user_id=user_id)
    db.session.delete(deadline)
    commit_or_rollback()
    logger.info("Deadline deleted id=%s user=%s", deadline_id, user_id)


def deadline_stats(user_id, now=None) -> dict:
    """Counts for the deadline summary.

    ``thisMonthCount`` covers every open deadline in the next 30 days, so it
    includes the ones already counted in ``thisWeekCount``. ``typeSummary``
    lists only the types that occur, keyed in lower case.
    """
    now = now or utcnow()
    week, month = _windows()
    base = Deadline.query_for_user(user_id)
    open_ = base.filter(Deadline.completed.is_(False))
    type_rows = (
        db.session.query(Deadline.type, func.count(Deadline.id))
        .filter(Deadline.user_id == user_id)
        .group_by(Deadline.type)
        .all()
    )
    return {
        "overdueCount": open_.filter(Deadline.date < now).count(),
        "thisWeekCount": open_.filter(Deadline.date >= now, Deadline.date <= now + week).count(),
        "thisMonthCount": open_.filter(Deadline.date >= now, Deadline.date <= now + month).count(),
        "completedCount": base.filter(Deadline.completed.is_(True)).count(),
        "typeSummary": {t.lower(): n for t, n in type_rows},
    }
