"""
Task service layer.

Owns the completed_at rule: a task that enters COMPLETED is stamped with
the transition time, a task that stays COMPLETED keeps its stamp, and any
other status clears it.
"""

import logging

from sqlalchemy import case

from gradtrack.models import db
from gradtrack.models.base import utcnow
from gradtrack.models.task import PRIORITY_RANK, TASK_PRIORITIES, TASK_STATUSES, Task
from gradtrack.services.helpers.scoped_queries import get_scoped
from gradtrack.services.university_service import require_owned_university
from gradtrack.services.validation import PayloadValidator
from gradtrack.utils.helpers import commit_or_rollback, config_window

logger = logging.getLogger(__name__)

KANBAN_BUCKETS = ("pending", "in_progress", "completed")


def validate_task(data, *, partial=False) -> dict:
    v = PayloadValidator(data, partial=partial)
    v.string("title", required=True, min_length=1, max_length=200)
    v.string("description", max_length=1000)
    v.enum("status", TASK_STATUSES, default="PENDING", nullable=False)
    v.enum("priority", TASK_PRIORITIES, default="MEDIUM", nullable=False)
    v.datetime("dueDate", "due_date")
    v.integer("universityId", "university_id")
    return v.validate()


def apply_completion(task: Task, new_status: str, now=None) -> None:
    """Set ``task.status`` and keep ``completed_at`` consistent with it."""
    now = now or utcnow()
    if new_status == "COMPLETED":
        if task.status != "COMPLETED" or task.completed_at is None:
            task.completed_at = now
    else:
        task.completed_at = None
    task.status = new_status


def bucket_by_status(tasks: list[dict]) -> dict:
    """Bucket serialized tasks by lower-cased status.

    pending / in_progress / completed are always present; other statuses
    get a bucket only when at least one task carries them.
    """
    grouped = {key: [] for key in KANBAN_BUCKETS}
    for t in tasks:
        grouped.setdefault(t["status"].lower(), []).append(t)
    return grouped


def list_tasks(user_id, status=None, priority=None, university_id=None) -> dict:
    q = Task.query_for_user(user_id)
    if status:
        q = q.filter(Task.status == status.upper())
    if priority:
        q = q.filter(Task.priority == priority.upper())
    if university_id is not None:
        q = q.filter(Task.university_id == university_id)

    rank = case(PRIORITY_RANK, value=Task.priority, else_=0)
    q = q.order_by(
        rank.desc(),
        Task.due_date.is_(None),
        Task.due_date.asc(),
        Task.created_at.desc(),
        Task.id.desc(),
    )
    tasks = [t.to_dict() for t in q.all()]
    return {"tasks": tasks, "kanbanTasks": bucket_by_status(tasks)}


def get_task(user_id, task_id) -> dict:
    return get_scoped(Task, task_id, user_id=user_id).to_dict()


def create_task(user_id, data) -> dict:
    cleaned = validate_task(data)
    require_owned_university(user_id, cleaned.get("university_id"))

    task = Task(user_id=user_id, **cleaned)
    if task.status == "COMPLETED":
        task.completed_at = task.created_at
    db.session.add(task)
    commit_or_rollback()
    logger.info("Task created id=%s user=%s status=%s", task.id, user_id, task.status)
    return task.to_dict()


def update_task(user_id, task_id, data) -> dict:
    task = get_scoped(Task, task_id, user_id=user_id)
    cleaned = validate_task(data, partial=True)
    if "university_id" in cleaned:
        require_owned_university(user_id, cleaned["university_id"])

    now = utcnow()
    status = cleaned.pop("status", None)
    for attr, value in cleaned.items():
        setattr(task, attr, value)
    if status is not None:
        previous = task.status
        apply_completion(task, status, now=now)
        if previous != status:
            logger.info("Task status id=%s %s -> %s", task.id, previous, status)
    task.updated_at = now
    commit_or_rollback()
    return task.to_dict()


def delete_task(user_id, task_id) -> None:
    task = get_scoped(Task, task_id, user_id=user_id)
    db.session.delete(task)
    commit_or_rollback()
    logger.info("Task deleted id=%s user=%s", task_id, user_id)


def task_stats(user_id, now=None) -> dict:
    """Status/priority histograms plus overdue and due-soon counts.

    Histogram keys are lower-cased and only values that occur are listed.
    """
    now = now or utcnow()
    tasks = Task.query_for_user(user_id).all()

    status_summary, priority_summary = {}, {}
    overdue = upcoming = 0
    horizon = now + config_window("THIS_WEEK_WINDOW_DAYS", 7)
    for t in tasks:
        status_summary[t.status.lower()] = status_summary.get(t.status.lower(), 0) + 1
        priority_summary[t.priority.lower()] = priority_summary.get(t.priority.lower(), 0) + 1
        if t.status == "COMPLETED" or t.due_date is None:
            continue
        if t.due_date < now:
            overdue += 1
        elif t.due_date <= horizon:
            upcoming += 1

    return {
        "statusSummary": status_summary,
        "prioritySummary": priority_summary,
        "overdueTasks": overdue,
        "upcomingTasks": upcoming,
    }
