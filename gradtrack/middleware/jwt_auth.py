"""
JWT Auth Middleware. Parses JWT from Authorization header, sets g.jwt_user_id.

Parsing never blocks a request on its own: an absent, expired or invalid
token simply leaves g.jwt_user_id as None. Protected blueprints attach
``require_user`` as a before_request hook to turn that into a 401.
"""

from flask import g, request

from gradtrack.services.jwt_service import user_id_from_token
from gradtrack.services.user_service import get_user_by_id
from gradtrack.utils.errors import E, api_error


# Paths that skip JWT parsing entirely
JWT_SKIP_PREFIXES = (
    "/api/v1/auth/login",
    "/api/v1/auth/register",
    "/api/v1/health",
    "/static/",
)


def _bearer_token():
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:].strip() or None  # Strip "Bearer "


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        g.jwt_user_id = None

        path = request.path
        if not (path.startswith("/api/v1/") or path.startswith("/views/")):
            return
        for prefix in JWT_SKIP_PREFIXES:
            if path.startswith(prefix):
                return

        token = _bearer_token()
        if token is None:
            return

        user_id = user_id_from_token(token)
        # Tokens of deleted accounts are treated as anonymous
        if user_id is not None and get_user_by_id(user_id) is not None:
            g.jwt_user_id = user_id


def require_user():
    """before_request hook for protected blueprints."""
    if request.method == "OPTIONS":
        return None
    if getattr(g, "jwt_user_id", None) is None:
        return api_error(E.UNAUTHENTICATED, "Authentication required")
    return None


def current_user_id() -> int:
    return g.jwt_user_id
