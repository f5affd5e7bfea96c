"""
Views Blueprint: server-rendered HTML fragments.

Each fragment is built from the same service payloads as the JSON API,
mapped through view models and rendered with Jinja2.

Endpoints (bearer token required):
    GET /views/dashboard      stats cards, urgent deadlines, recent activity
    GET /views/kanban         board (query: priority, university, search, sort=<field>-<dir>)
    GET /views/deadlines      deadlines grouped by category
    GET /views/universities   university cards

Common query params: compact=true, limit=<n>
"""

from flask import Blueprint, render_template, request

from gradtrack.blueprints import init_resource_blueprint
from gradtrack.core.exceptions import ValidationError
from gradtrack.middleware.jwt_auth import current_user_id
from gradtrack.models.base import utcnow
from gradtrack.services import dashboard_service, deadline_service, task_service, university_service
from gradtrack.services import view_models as vm
from gradtrack.services.kanban import KanbanBoard, KanbanFilters, KanbanSort
from gradtrack.utils.helpers import parse_bool

views_bp = Blueprint("views", __name__, url_prefix="/views")
init_resource_blueprint(views_bp)

CATEGORY_TITLES = {
    "overdue": "Overdue",
    "thisWeek": "This Week",
    "thisMonth": "This Month",
    "upcoming": "Later",
    "completed": "Completed",
}


def _view_config():
    limit = request.args.get("limit", 5, type=int)
    return vm.ViewConfig(
        compact=parse_bool(request.args.get("compact")) is True,
        max_items=limit if limit and limit > 0 else 5,
        now=utcnow(),
    )


@views_bp.route("/dashboard", methods=["GET"])
def dashboard():
    user_id = current_user_id()
    config = _view_config()
    stats = vm.dashboard_stats_view(dashboard_service.get_dashboard_stats(user_id, now=config.now))
    activity = dashboard_service.get_recent_activity(user_id, config.max_items)["activities"]
    categorized = deadline_service.list_deadlines(user_id, now=config.now)["categorizedDeadlines"]
    return render_template(
        "partials/dashboard.html",
        stats=stats,
        activities=vm.activity_views(activity, config),
        deadlines=vm.urgent_deadline_views(categorized, config),
        config=config,
    )


@views_bp.route("/kanban", methods=["GET"])
def kanban():
    config = _view_config()
    try:
        sort = KanbanSort.parse(request.args.get("sort"))
    except ValueError as exc:
        raise ValidationError("Validation failed", details=[{"field": "sort", "message": str(exc)}])
    tasks = task_service.list_tasks(current_user_id())["tasks"]
    board = KanbanBoard(tasks, KanbanFilters.from_args(request.args), sort)
    return render_template(
        "partials/kanban.html",
        columns=vm.kanban_column_views(board.render(), config),
        config=config,
    )


@views_bp.route("/deadlines", methods=["GET"])
def deadlines():
    config = _view_config()
    categorized = deadline_service.list_deadlines(current_user_id(), now=config.now)["categorizedDeadlines"]
    groups = [
        (CATEGORY_TITLES[key], [vm.deadline_item_view(d, config) for d in categorized[key]])
        for key in deadline_service.CATEGORY_KEYS
    ]
    return render_template("partials/deadlines.html", groups=groups, config=config)


@views_bp.route("/universities", methods=["GET"])
def universities():
    config = _view_config()
    items = university_service.list_universities(current_user_id())
    return render_template(
        "partials/universities.html",
        universities=[vm.university_card_view(u, config) for u in items],
        config=config,
    )
