"""
Document Blueprint

Endpoints (all require a bearer token, scoped to the caller):
    GET    /api/v1/documents               list + groupedDocuments (filter: type)
    GET    /api/v1/documents/stats/summary counts per type
    GET    /api/v1/documents/<id>
    POST   /api/v1/documents               version "auto" picks the next label
    PUT    /api/v1/documents/<id>
    DELETE /api/v1/documents/<id>
"""

from flask import Blueprint, jsonify, request

from gradtrack.blueprints import init_resource_blueprint
from gradtrack.middleware.jwt_auth import current_user_id
from gradtrack.services import document_service as svc

document_bp = Blueprint("documents", __name__, url_prefix="/api/v1/documents")
init_resource_blueprint(document_bp)


@document_bp.route("", methods=["GET"])
def list_documents():
    result = svc.list_documents(current_user_id(), doc_type=request.args.get("type") or None)
    return jsonify(result), 200


@document_bp.route("/stats/summary", methods=["GET"])
def document_summary():
    return jsonify(svc.document_stats(current_user_id())), 200


@document_bp.route("/<int:document_id>", methods=["GET"])
def get_document(document_id):
    return jsonify({"document": svc.get_document(current_user_id(), document_id)}), 200


@document_bp.route("", methods=["POST"])
def create_document():
    document = svc.create_document(current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Document created successfully", "document": document}), 201


@document_bp.route("/<int:document_id>", methods=["PUT"])
def update_document(document_id):
    document = svc.update_document(current_user_id(), document_id, request.get_json(silent=True))
    return jsonify({"message": "Document updated successfully", "document": document}), 200


@document_bp.route("/<int:document_id>", methods=["DELETE"])
def delete_document(document_id):
    svc.delete_document(current_user_id(), document_id)
    return jsonify({"message": "Document deleted successfully"}), 200
