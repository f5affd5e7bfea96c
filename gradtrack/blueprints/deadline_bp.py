"""
Deadline Blueprint

Endpoints (all require a bearer token, scoped to the caller):
    GET    /api/v1/deadlines               list + categorizedDeadlines
                                           (filters: type, completed, universityId, upcoming)
    GET    /api/v1/deadlines/stats/summary bucket counts + per-type counts
    GET    /api/v1/deadlines/<id>
    POST   /api/v1/deadlines
    PUT    /api/v1/deadlines/<id>
    DELETE /api/v1/deadlines/<id>
"""

from flask import Blueprint, jsonify, request

from gradtrack.blueprints import init_resource_blueprint, query_int
from gradtrack.middleware.jwt_auth import current_user_id
from gradtrack.services import deadline_service as svc
from gradtrack.utils.helpers import parse_bool

deadline_bp = Blueprint("deadlines", __name__, url_prefix="/api/v1/deadlines")
init_resource_blueprint(deadline_bp)


@deadline_bp.route("", methods=["GET"])
def list_deadlines():
    result = svc.list_deadlines(
        current_user_id(),
        deadline_type=request.args.get("type") or None,
        completed=parse_bool(request.args.get("completed")),
        university_id=query_int("universityId"),
        upcoming=parse_bool(request.args.get("upcoming")) is True,
    )
    return jsonify(result), 200


@deadline_bp.route("/stats/summary", methods=["GET"])
def deadline_summary():
    return jsonify(svc.deadline_stats(current_user_id())), 200


@deadline_bp.route("/<int:deadline_id>", methods=["GET"])
def get_deadline(deadline_id):
    return jsonify({"deadline": svc.get_deadline(current_user_id(), deadline_id)}), 200


@deadline_bp.route("", methods=["POST"])
def create_deadline():
    deadline = svc.create_deadline(current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Deadline created successfully", "deadline": deadline}), 201


@deadline_bp.route("/<int:deadline_id>", methods=["PUT"])
def update_deadline(deadline_id):
    deadline = svc.update_deadline(current_user_id(), deadline_id, request.get_json(silent=True))
    return jsonify({"message": "Deadline updated successfully", "deadline": deadline}), 200


@deadline_bp.route("/<int:deadline_id>", methods=["DELETE"])
def delete_deadline(deadline_id):
    svc.delete_deadline(current_user_id(), deadline_id)
    return jsonify({"message": "Deadline deleted successfully"}), 200
