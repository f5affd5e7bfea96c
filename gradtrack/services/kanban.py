"""
Kanban board: filter, sort and group tasks into status columns.

Operates on serialized task payloads (the ``to_dict`` / API shape), so the
same code drives the server-rendered board and the API client cache.

    board = KanbanBoard(tasks, KanbanFilters(priority="HIGH"), KanbanSort.parse("due-asc"))
    columns = board.render()
    board.move_task(7, "completed", persist=client.update_task)
"""

import copy
import logging
from dataclasses import dataclass
from datetime import datetime

from gradtrack.models.base import utcnow
from gradtrack.models.task import PRIORITY_RANK
from gradtrack.utils.helpers import parse_datetime

logger = logging.getLogger(__name__)

KANBAN_COLUMNS = ("pending", "in_progress", "completed")
COLUMN_STATUS = {
    "pending": "PENDING",
    "in_progress": "IN_PROGRESS",
    "completed": "COMPLETED",
}
SORT_FIELDS = ("created", "priority", "due", "title")
SORT_DIRECTIONS = ("asc", "desc")

# Tasks without a due date sort as if due at the far end of time
NO_DUE_DATE = datetime.max
_EPOCH = parse_datetime("1970-01-01")


class TaskMoveError(Exception):
    """Raised when persisting a Kanban move fails; the board has been rolled back."""

    def __init__(self, task_id, column, cause=None):
        self.task_id = task_id
        self.column = column
        self.cause = cause
        super().__init__(f"Failed to move task {task_id} to {column}")


def _due(task):
    try:
        return parse_datetime(task.get("dueDate"))
    except ValueError:
        return None


def is_overdue(task: dict, now=None) -> bool:
    """Due date in the past and not yet completed."""
    due = _due(task)
    if due is None or task.get("status") == "COMPLETED":
        return False
    return due < (now or utcnow())


@dataclass
class KanbanFilters:
    priority: str = "all"
    university: str = "all"
    search: str = ""

    @classmethod
    def from_args(cls, args):
        return cls(
            priority=(args.get("priority") or "all"),
            university=str(args.get("university") or "all"),
            search=(args.get("search") or ""),
        )

    def matches(self, task: dict) -> bool:
        if self.priority.lower() != "all" and task.get("priority") != self.priority.upper():
            return False
        if str(self.university).lower() != "all" and str(task.get("universityId")) != str(self.university):
            return False
        needle = self.search.strip().lower()
        if needle:
            haystack = f"{task.get('title') or ''}\n{task.get('description') or ''}".lower()
            if needle not in haystack:
                return False
        return True


@dataclass
class KanbanSort:
    field: str = "created"
    direction: str = "desc"

    def __post_init__(self):
        if self.field not in SORT_FIELDS:
            raise ValueError(f"Unknown sort field: {self.field}")
        if self.direction not in SORT_DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {self.direction}")

    @classmethod
    def parse(cls, value):
        """Parse ``"<field>-<direction>"`` (e.g. ``"due-asc"``); empty means the default."""
        if not value:
            return cls()
        field, _, direction = str(value).partition("-")
        return cls(field=field, direction=direction or "desc")

    def key(self, task):
        if self.field == "priority":
            return PRIORITY_RANK.get(task.get("priority"), 0)
        if self.field == "due":
            return _due(task) or NO_DUE_DATE
        if self.field == "title":
            return (task.get("title") or "").lower()
        return parse_datetime(task.get("createdAt")) or _EPOCH


def filter_tasks(tasks, filters: KanbanFilters):
    return [t for t in tasks if filters.matches(t)]


def sort_tasks(tasks, sort: KanbanSort):
    """Stable sort; equal keys keep their input order in both directions."""
    return sorted(tasks, key=sort.key, reverse=sort.direction == "desc")


def group_by_status(tasks) -> dict:
    """Bucket tasks into the three board columns. Other statuses are not shown."""
    columns = {key: [] for key in KANBAN_COLUMNS}
    for t in tasks:
        key = (t.get("status") or "").lower()
        if key in columns:
            columns[key].append(t)
    return columns


class KanbanBoard:
    """Cached task list plus the active filter and sort settings."""

    def __init__(self, tasks=None, filters=None, sort=None):
        self.tasks = list(tasks or [])
        self.filters = filters or KanbanFilters()
        self.sort = sort or KanbanSort()

    def load(self, tasks):
        self.tasks = list(tasks)

    def render(self) -> dict:
        visible = sort_tasks(filter_tasks(self.tasks, self.filters), self.sort)
        return group_by_status(visible)

    def counts(self) -> dict:
        return {key: len(items) for key, items in self.render().items()}

    def _find(self, task_id):
        for index, task in enumerate(self.tasks):
            if task.get("id") == task_id:
                return index, task
        raise KeyError(task_id)

    def move_task(self, task_id, column, persist):
        """Move a task to ``column`` optimistically.

        The cached status changes first; ``persist(task_id, {"status": ...})``
        is then called. Its return value (the server's copy of the task) replaces
        the cached entry. If it raises, the cache is restored and TaskMoveError
        is raised.
        """
        if column not in COLUMN_STATUS:
            raise ValueError(f"Unknown Kanban column: {column}")
        index, task = self._find(task_id)
        status = COLUMN_STATUS[column]
        if task.get("status") == status:
            return task

        snapshot = copy.deepcopy(self.tasks)
        moved = dict(task, status=status)
        self.tasks[index] = moved
        try:
            saved = persist(task_id, {"status": status})
        except Exception as exc:
            self.tasks = snapshot
            logger.warning("Kanban move rolled back task=%s column=%s: %s", task_id, column, exc)
            raise TaskMoveError(task_id, column, exc) from exc

        if isinstance(saved, dict):
            self.tasks[index] = saved
            return saved
        return moved
