"""
View models for dashboard, Kanban, deadline and university widgets.

Each widget gets a typed record built by a pure mapping function from the
API payload shape. Rendering (Jinja templates, the API client, tests) only
ever sees these records. One ``ViewConfig`` decides compact vs. full output
so there is a single render path per widget.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import urlparse

from gradtrack.models.base import utcnow
from gradtrack.services.kanban import KANBAN_COLUMNS, is_overdue
from gradtrack.utils.helpers import parse_datetime

COLUMN_TITLES = {
    "pending": "To Do",
    "in_progress": "In Progress",
    "completed": "Done",
}

ACTIVITY_ICONS = {
    "university": "university",
    "document": "file-alt",
    "task": "tasks",
    "deadline": "calendar-alt",
}

COMPACT_TEXT_LIMIT = 80


@dataclass
class ViewConfig:
    compact: bool = False
    max_items: int = 5
    now: datetime | None = None

    def current_time(self) -> datetime:
        return self.now or utcnow()


# ── Formatting helpers ───────────────────────────────────────────────────────

def _as_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    try:
        return parse_datetime(value)
    except ValueError:
        return None


def days_until(value, now=None):
    """Whole days until ``value``, rounded up. None when there is no date."""
    when = _as_datetime(value)
    if when is None:
        return None
    now = now or utcnow()
    return math.ceil((when - now).total_seconds() / 86400)


def format_date(value) -> str:
    when = _as_datetime(value)
    return when.strftime("%b %d, %Y") if when else "No date"


def format_due_label(value, now=None) -> str:
    """Kanban due label: "3 days overdue", "Due today", "Due in 5 days" or the calendar date."""
    diff = days_until(value, now)
    if diff is None:
        return "No due date"
    if diff < 0:
        return f"{abs(diff)} days overdue"
    if diff == 0:
        return "Due today"
    if diff == 1:
        return "Due tomorrow"
    if diff <= 7:
        return f"Due in {diff} days"
    return format_date(value)


def format_time_until(value, now=None) -> str:
    diff = days_until(value, now)
    if diff is None:
        return ""
    if diff < 0:
        return "Overdue"
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    return f"{diff} days"


def format_time_ago(value, now=None) -> str:
    when = _as_datetime(value)
    if when is None:
        return ""
    hours = math.floor(((now or utcnow()) - when).total_seconds() / 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_status(status) -> str:
    """``PLANNING_TO_APPLY`` → ``Planning To Apply``."""
    return (status or "").replace("_", " ").title()


def extract_domain(url) -> str:
    """Host part of ``url``; the input unchanged when it does not parse."""
    if not url:
        return ""
    host = urlparse(url).hostname
    return host or url


def _shorten(text, config: ViewConfig):
    if not text or not config.compact or len(text) <= COMPACT_TEXT_LIMIT:
        return text
    return text[:COMPACT_TEXT_LIMIT - 1].rstrip() + "…"


# ── Dashboard ────────────────────────────────────────────────────────────────

@dataclass
class DashboardStatsView:
    universities_total: int = 0
    applied: int = 0
    admitted: int = 0
    pending_tasks: int = 0
    overdue_tasks: int = 0
    high_priority_tasks: int = 0
    total_tasks: int = 0
    upcoming_deadlines: int = 0
    this_week_deadlines: int = 0
    documents_total: int = 0
    by_status: dict = field(default_factory=dict)
    by_category: dict = field(default_factory=dict)
    by_type: dict = field(default_factory=dict)


def dashboard_stats_view(stats) -> DashboardStatsView:
    """Map ``GET /dashboard/stats``; missing sections read as zero."""
    stats = stats or {}
    unis = stats.get("universities") or {}
    deadlines = stats.get("deadlines") or {}
    tasks = stats.get("tasks") or {}
    docs = stats.get("documents") or {}
    by_status = unis.get("byStatus") or {}
    return DashboardStatsView(
        universities_total=unis.get("total", 0),
        applied=by_status.get("applied", 0),
        admitted=by_status.get("admitted", 0),
        pending_tasks=tasks.get("pending", 0),
        overdue_tasks=tasks.get("overdue", 0),
        high_priority_tasks=tasks.get("highPriority", 0),
        total_tasks=tasks.get("total", 0),
        upcoming_deadlines=deadlines.get("upcoming", 0),
        this_week_deadlines=deadlines.get("thisWeek", 0),
        documents_total=docs.get("total", 0),
        by_status=dict(by_status),
        by_category=dict(unis.get("byCategory") or {}),
        by_type=dict(docs.get("byType") or {}),
    )


@dataclass
class ActivityItemView:
    id: str
    type: str
    action: str
    title: str
    description: str
    time_ago: str
    icon: str


def activity_views(activities, config: ViewConfig | None = None) -> list[ActivityItemView]:
    config = config or ViewConfig()
    now = config.current_time()
    return [
        ActivityItemView(
            id=a.get("id", ""),
            type=a.get("type", ""),
            action=a.get("action", ""),
            title=a.get("title", ""),
            description=_shorten(a.get("description", ""), config),
            time_ago=format_time_ago(a.get("timestamp"), now),
            icon=ACTIVITY_ICONS.get(a.get("type"), "circle"),
        )
        for a in (activities or [])[: config.max_items]
    ]


# ── Deadlines ────────────────────────────────────────────────────────────────

@dataclass
class DeadlineItemView:
    id: int
    title: str
    type: str
    university_name: str
    date_label: str
    time_until: str
    overdue: bool
    days_until: int | None


def deadline_item_view(deadline, config: ViewConfig | None = None) -> DeadlineItemView:
    config = config or ViewConfig()
    now = config.current_time()
    when = _as_datetime(deadline.get("date"))
    overdue = bool(when and when < now and not deadline.get("completed"))
    university = deadline.get("university") or {}
    return DeadlineItemView(
        id=deadline.get("id"),
        title=deadline.get("title", ""),
        type=deadline.get("type", ""),
        university_name=university.get("name") or "General",
        date_label=format_date(when),
        time_until="Overdue" if overdue else format_time_until(when, now),
        overdue=overdue,
        days_until=days_until(when, now),
    )


def urgent_deadline_views(categorized, config: ViewConfig | None = None) -> list[DeadlineItemView]:
    """Overdue first, then this week's; capped at ``config.max_items``."""
    config = config or ViewConfig()
    categorized = categorized or {}
    urgent = list(categorized.get("overdue") or []) + list(categorized.get("thisWeek") or [])
    return [deadline_item_view(d, config) for d in urgent[: config.max_items]]


# ── Kanban ───────────────────────────────────────────────────────────────────

@dataclass
class TaskCardView:
    id: int
    title: str
    description: str | None
    status: str
    priority: str
    priority_class: str
    university_name: str | None
    due_label: str | None
    overdue: bool


@dataclass
class KanbanColumnView:
    key: str
    title: str
    count: int
    cards: list = field(default_factory=list)


def task_card_view(task, config: ViewConfig | None = None) -> TaskCardView:
    config = config or ViewConfig()
    now = config.current_time()
    university = task.get("university") or {}
    due = task.get("dueDate")
    return TaskCardView(
        id=task.get("id"),
        title=task.get("title", ""),
        description=_shorten(task.get("description"), config),
        status=task.get("status", ""),
        priority=task.get("priority", ""),
        priority_class=f"priority-{(task.get('priority') or 'medium').lower()}",
        university_name=university.get("name"),
        due_label=format_due_label(due, now) if due else None,
        overdue=is_overdue(task, now),
    )


def kanban_column_views(columns, config: ViewConfig | None = None) -> list[KanbanColumnView]:
    """Map grouped tasks to the three board columns, in board order."""
    config = config or ViewConfig()
    columns = columns or {}
    views = []
    for key in KANBAN_COLUMNS:
        tasks = columns.get(key) or []
        views.append(KanbanColumnView(
            key=key,
            title=COLUMN_TITLES[key],
            count=len(tasks),
            cards=[task_card_view(t, config) for t in tasks],
        ))
    return views


# ── Universities ─────────────────────────────────────────────────────────────

@dataclass
class UniversityCardView:
    id: int
    name: str
    url: str | None
    domain: str
    status: str
    status_label: str
    category: str
    deadline_label: str
    lor_deadline_label: str | None
    notes: str | None
    open_tasks: int = 0
    pending_deadlines: int = 0
    requirements_done: int = 0
    requirements_total: int = 0


def university_card_view(uni, config: ViewConfig | None = None) -> UniversityCardView:
    config = config or ViewConfig()
    requirements = uni.get("requirements") or []
    tasks = uni.get("tasks") or []
    deadlines = uni.get("deadlines") or []
    return UniversityCardView(
        id=uni.get("id"),
        name=uni.get("name", ""),
        url=uni.get("url"),
        domain=extract_domain(uni.get("url")),
        status=uni.get("status", ""),
        status_label=format_status(uni.get("status")),
        category=uni.get("category", ""),
        deadline_label=format_date(uni.get("deadline")),
        lor_deadline_label=format_date(uni.get("lorDeadline")) if uni.get("lorDeadline") else None,
        notes=None if config.compact else uni.get("notes"),
        open_tasks=sum(1 for t in tasks if t.get("status") != "COMPLETED"),
        pending_deadlines=sum(1 for d in deadlines if not d.get("completed")),
        requirements_done=sum(1 for r in requirements if r.get("completed")),
        requirements_total=len(requirements),
    )
