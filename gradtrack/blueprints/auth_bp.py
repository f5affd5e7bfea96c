"""
Auth Blueprint

Endpoints:
    POST /api/v1/auth/register   { email, password, name? } → { token, user }
    POST /api/v1/auth/login      { email, password }        → { token, user }
    GET  /api/v1/auth/me         current user profile (bearer token)
"""

from flask import Blueprint, g, jsonify, request

from gradtrack.blueprints import register_error_handlers
from gradtrack.services import user_service as svc
from gradtrack.utils.errors import E, api_error

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
register_error_handlers(auth_bp)


@auth_bp.route("/register", methods=["POST"])
def register():
    result = svc.register_user(request.get_json(silent=True))
    return jsonify({"message": "User registered successfully", **result}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    result = svc.login_user(request.get_json(silent=True) or {})
    return jsonify({"message": "Login successful", **result}), 200


@auth_bp.route("/me", methods=["GET"])
def me():
    """Get current user profile from JWT."""
    user = svc.get_user_by_id(getattr(g, "jwt_user_id", None))
    if not user:
        return api_error(E.UNAUTHENTICATED, "Authentication required")
    return jsonify({"user": user.to_dict()}), 200
