"""
University Blueprint

Endpoints (all require a bearer token, scoped to the caller):
    GET    /api/v1/universities            list (filters: status, category)
    GET    /api/v1/universities/<id>       detail with requirements, tasks, deadlines
    POST   /api/v1/universities            create (optional nested requirements)
    PUT    /api/v1/universities/<id>       partial update
    DELETE /api/v1/universities/<id>       delete; tasks/deadlines are detached
"""

from flask import Blueprint, jsonify, request

from gradtrack.blueprints import init_resource_blueprint
from gradtrack.middleware.jwt_auth import current_user_id
from gradtrack.services import university_service as svc

university_bp = Blueprint("universities", __name__, url_prefix="/api/v1/universities")
init_resource_blueprint(university_bp)


@university_bp.route("", methods=["GET"])
def list_universities():
    universities = svc.list_universities(
        current_user_id(),
        status=request.args.get("status") or None,
        category=request.args.get("category") or None,
    )
    return jsonify({"universities": universities}), 200


@university_bp.route("/<int:university_id>", methods=["GET"])
def get_university(university_id):
    return jsonify({"university": svc.get_university(current_user_id(), university_id)}), 200


@university_bp.route("", methods=["POST"])
def create_university():
    data = request.get_json(silent=True)
    university = svc.create_university(current_user_id(), data)
    return jsonify({"message": "University created successfully", "university": university}), 201


@university_bp.route("/<int:university_id>", methods=["PUT"])
def update_university(university_id):
    data = request.get_json(silent=True)
    university = svc.update_university(current_user_id(), university_id, data)
    return jsonify({"message": "University updated successfully", "university": university}), 200


@university_bp.route("/<int:university_id>", methods=["DELETE"])
def delete_university(university_id):
    svc.delete_university(current_user_id(), university_id)
    return jsonify({"message": "University deleted successfully"}), 200
