"""
Dashboard Service

Aggregates one user's tracker data for the dashboard:
  - Headline stats (universities, deadlines, tasks, documents)
  - Recent activity feed merged across all four entity types
  - Next upcoming deadlines with days-until countdown
"""

import logging
import math

from sqlalchemy import func

from gradtrack.models import db
from gradtrack.models.base import isoformat, utcnow
from gradtrack.models.deadline import Deadline
from gradtrack.models.document import Document
from gradtrack.models.task import Task
from gradtrack.models.university import University
from gradtrack.utils.helpers import config_window

logger = logging.getLogger(__name__)

ACTIVITY_PER_TYPE = 5
DEFAULT_ACTIVITY_LIMIT = 10
UPCOMING_DEADLINES_LIMIT = 5


def _grouped_counts(column, user_column, user_id):
    rows = (
        db.session.query(column, func.count())
        .filter(user_column == user_id)
        .group_by(column)
        .all()
    )
    return {(key or "unknown").lower(): count for key, count in rows}


def get_dashboard_stats(user_id, now=None):
    """Headline counts for the dashboard widgets.

    ``thisMonth`` shares the 30-day window with ``upcoming``.
    """
    now = now or utcnow()
    week = now + config_window("THIS_WEEK_WINDOW_DAYS", 7)
    month = now + config_window("UPCOMING_WINDOW_DAYS", 30)

    open_deadlines = Deadline.query_for_user(user_id).filter(
        Deadline.completed.is_(False), Deadline.date >= now,
    )
    upcoming = open_deadlines.filter(Deadline.date <= month).count()
    this_week = open_deadlines.filter(Deadline.date <= week).count()

    tasks = Task.query_for_user(user_id)
    not_completed = Task.status != "COMPLETED"

    stats = {
        "universities": {
            "total": University.query_for_user(user_id).count(),
            "byStatus": _grouped_counts(University.status, University.user_id, user_id),
            "byCategory": _grouped_counts(University.category, University.user_id, user_id),
        },
        "deadlines": {
            "upcoming": upcoming,
            "thisWeek": this_week,
            "thisMonth": upcoming,
        },
        "tasks": {
            "total": tasks.count(),
            "pending": tasks.filter(Task.status.in_(("PENDING", "IN_PROGRESS"))).count(),
            "overdue": tasks.filter(not_completed, Task.due_date < now).count(),
            "highPriority": tasks.filter(
                not_completed, Task.priority.in_(("HIGH", "URGENT")),
            ).count(),
        },
        "documents": {
            "total": Document.query_for_user(user_id).count(),
            "byType": _grouped_counts(Document.type, Document.user_id, user_id),
        },
    }
    logger.debug("Dashboard stats computed user=%s", user_id)
    return stats


# ═══════════════════════════════════════════════════════════════
# Activity feed
# ═══════════════════════════════════════════════════════════════

def _recent(model, user_id):
    return (
        model.query_for_user(user_id)
        .order_by(model.updated_at.desc(), model.id.desc())
        .limit(ACTIVITY_PER_TYPE)
        .all()
    )


def _is_new(row):
    return row.created_at == row.updated_at


def _university_activity(uni):
    created = _is_new(uni)
    return {
        "id": f"uni-{uni.id}",
        "type": "university",
        "action": "created" if created else "updated",
        "title": f"{'Added' if created else 'Updated'} {uni.name}",
        "description": f"{uni.category} school",
        "timestamp": uni.updated_at,
        "data": {"id": uni.id, "name": uni.name, "status": uni.status, "category": uni.category},
    }


def _document_activity(doc):
    created = _is_new(doc)
    return {
        "id": f"doc-{doc.id}",
        "type": "document",
        "action": "created" if created else "updated",
        "title": f"{'Uploaded' if created else 'Updated'} {doc.name}",
        "description": f"{doc.type} {doc.version}",
        "timestamp": doc.updated_at,
        "data": {"id": doc.id, "name": doc.name, "type": doc.type, "version": doc.version},
    }


def _task_activity(task):
    if task.completed_at is not None and task.status == "COMPLETED":
        action, verb = "completed", "Completed"
    elif _is_new(task):
        action, verb = "created", "Added"
    else:
        action, verb = "updated", "Updated"
    return {
        "id": f"task-{task.id}",
        "type": "task",
        "action": action,
        "title": f"{verb} {task.title}",
        "description": (
            f"Related to {task.university.name}" if task.university else "General task"
        ),
        "timestamp": task.updated_at,
        "data": task.to_dict(),
    }


def _deadline_activity(deadline):
    if deadline.completed:
        action, verb = "completed", "Completed"
    elif _is_new(deadline):
        action, verb = "created", "Added"
    else:
        action, verb = "updated", "Updated"
    return {
        "id": f"deadline-{deadline.id}",
        "type": "deadline",
        "action": action,
        "title": f"{verb} {deadline.title}",
        "description": (
            f"{deadline.university.name} - {deadline.type}" if deadline.university else deadline.type
        ),
        "timestamp": deadline.updated_at,
        "data": deadline.to_dict(),
    }


def get_recent_activity(user_id, limit=DEFAULT_ACTIVITY_LIMIT):
    """Merged activity feed, newest first.

    Five most recently updated rows are taken per entity type, merged and
    cut to ``limit``. ``totalCount`` is the merged size before the cut.
    """
    if not limit or limit < 1:
        limit = DEFAULT_ACTIVITY_LIMIT

    activities = (
        [_university_activity(u) for u in _recent(University, user_id)]
        + [_document_activity(d) for d in _recent(Document, user_id)]
        + [_task_activity(t) for t in _recent(Task, user_id)]
        + [_deadline_activity(d) for d in _recent(Deadline, user_id)]
    )
    activities.sort(key=lambda a: a["timestamp"], reverse=True)

    limited = activities[:limit]
    for a in limited:
        a["timestamp"] = isoformat(a["timestamp"])
    return {"activities": limited, "totalCount": len(activities)}


def get_upcoming_deadlines(user_id, now=None):
    """Next incomplete deadlines within the upcoming window, soonest first."""
    now = now or utcnow()
    rows = (
        Deadline.query_for_user(user_id)
        .filter(
            Deadline.completed.is_(False),
            Deadline.date >= now,
            Deadline.date <= now + config_window("UPCOMING_WINDOW_DAYS", 30),
        )
        .order_by(Deadline.date.asc(), Deadline.id.asc())
        .limit(UPCOMING_DEADLINES_LIMIT)
        .all()
    )
    result = []
    for d in rows:
        item = d.to_dict()
        item["daysUntil"] = math.ceil((d.date - now).total_seconds() / 86400)
        result.append(item)
    return {"upcomingDeadlines": result}
