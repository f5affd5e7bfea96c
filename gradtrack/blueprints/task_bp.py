"""
Task Blueprint

Endpoints (all require a bearer token, scoped to the caller):
    GET    /api/v1/tasks                   list + kanbanTasks (filters: status, priority, universityId)
    GET    /api/v1/tasks/stats/summary     status / priority histograms, overdue, due this week
    GET    /api/v1/tasks/<id>
    POST   /api/v1/tasks
    PUT    /api/v1/tasks/<id>              partial update; status drives completedAt
    DELETE /api/v1/tasks/<id>
"""

from flask import Blueprint, jsonify, request

from gradtrack.blueprints import init_resource_blueprint, query_int
from gradtrack.middleware.jwt_auth import current_user_id
from gradtrack.services import task_service as svc

task_bp = Blueprint("tasks", __name__, url_prefix="/api/v1/tasks")
init_resource_blueprint(task_bp)


@task_bp.route("", methods=["GET"])
def list_tasks():
    result = svc.list_tasks(
        current_user_id(),
        status=request.args.get("status") or None,
        priority=request.args.get("priority") or None,
        university_id=query_int("universityId"),
    )
    return jsonify(result), 200


@task_bp.route("/stats/summary", methods=["GET"])
def task_summary():
    return jsonify(svc.task_stats(current_user_id())), 200


@task_bp.route("/<int:task_id>", methods=["GET"])
def get_task(task_id):
    return jsonify({"task": svc.get_task(current_user_id(), task_id)}), 200


@task_bp.route("", methods=["POST"])
def create_task():
    task = svc.create_task(current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Task created successfully", "task": task}), 201


@task_bp.route("/<int:task_id>", methods=["PUT"])
def update_task(task_id):
    task = svc.update_task(current_user_id(), task_id, request.get_json(silent=True))
    return jsonify({"message": "Task updated successfully", "task": task}), 200


@task_bp.route("/<int:task_id>", methods=["DELETE"])
def delete_task(task_id):
    svc.delete_task(current_user_id(), task_id)
    return jsonify({"message": "Task deleted successfully"}), 200
