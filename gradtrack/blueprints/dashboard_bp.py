"""
Dashboard Blueprint

Per-user aggregates for the dashboard widgets.
"""

from flask import Blueprint, jsonify, request

from gradtrack.blueprints import init_resource_blueprint
from gradtrack.middleware.jwt_auth import current_user_id
from gradtrack.services import dashboard_service as svc

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/v1/dashboard")
init_resource_blueprint(dashboard_bp)


@dashboard_bp.route("/stats", methods=["GET"])
def stats():
    """Headline counts: universities, deadlines, tasks, documents."""
    return jsonify(svc.get_dashboard_stats(current_user_id())), 200


@dashboard_bp.route("/activity", methods=["GET"])
def activity():
    """Recent activity feed (default 10 items)."""
    limit = request.args.get("limit", svc.DEFAULT_ACTIVITY_LIMIT, type=int)
    return jsonify(svc.get_recent_activity(current_user_id(), limit)), 200


@dashboard_bp.route("/upcoming-deadlines", methods=["GET"])
def upcoming_deadlines():
    """Next five incomplete deadlines within 30 days."""
    return jsonify(svc.get_upcoming_deadlines(current_user_id())), 200
