"""
GradTrack
Flask Application Factory.

Usage:
    from gradtrack import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask, abort, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from gradtrack.config import config
from gradtrack.models import db
from gradtrack.middleware.logging_config import configure_logging
from gradtrack.middleware.timing import init_request_timing
from gradtrack.middleware.security_headers import init_security_headers
from gradtrack.middleware.rate_limiter import init_rate_limits
from gradtrack.middleware.jwt_auth import init_jwt_middleware
from gradtrack.utils.errors import E, api_error

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine

logger = logging.getLogger(__name__)


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit; applied per-blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    # Instantiate so ProductionConfig can refuse to start without its env vars
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///") and not app.testing:
        os.makedirs(app.instance_path, exist_ok=True)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Security headers (CSP, HSTS, X-Frame-Options, etc.) ─────────────
    init_security_headers(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── JWT auth middleware (sets g.jwt_user_id) ─────────────────────────
    init_jwt_middleware(app)

    # ── Request guards (input length + Content-Type) ─────────────────────
    @app.before_request
    def _guard_request():
        max_len = app.config.get("MAX_CONTENT_LENGTH")
        if max_len and request.content_length and request.content_length > max_len:
            abort(413, description="Request body too large")
        if request.method in ("POST", "PUT", "PATCH") and request.path.startswith("/api/"):
            ct = request.content_type or ""
            if request.data and "json" not in ct:
                abort(415, description="Content-Type must be application/json")

    # ── Import all models so Alembic can detect them ─────────────────────
    from gradtrack.models import auth as _auth_models               # noqa: F401
    from gradtrack.models import university as _university_models   # noqa: F401
    from gradtrack.models import task as _task_models               # noqa: F401
    from gradtrack.models import document as _document_models       # noqa: F401
    from gradtrack.models import deadline as _deadline_models       # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    with app.app_context():
        db.create_all()
        if not app.testing:
            app.logger.info("db.create_all() completed successfully")

    # ── Blueprints ───────────────────────────────────────────────────────
    from gradtrack.blueprints.auth_bp import auth_bp
    from gradtrack.blueprints.university_bp import university_bp
    from gradtrack.blueprints.task_bp import task_bp
    from gradtrack.blueprints.document_bp import document_bp
    from gradtrack.blueprints.deadline_bp import deadline_bp
    from gradtrack.blueprints.dashboard_bp import dashboard_bp
    from gradtrack.blueprints.health_bp import health_bp
    from gradtrack.blueprints.views_bp import views_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(university_bp)
    app.register_blueprint(task_bp)
    app.register_blueprint(document_bp)
    app.register_blueprint(deadline_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(views_bp)

    init_rate_limits(app, limiter)

    # ── Health check (detailed version at /health/live) ──────────────────
    @app.route("/api/v1/health")
    def health():
        return {"status": "ok", "app": "GradTrack"}

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        return api_error(E.NOT_FOUND, "Not found")

    @app.errorhandler(405)
    def method_not_allowed(e):
        return api_error("ERR_METHOD_NOT_ALLOWED", "Method not allowed", status=405)

    @app.errorhandler(413)
    def too_large(e):
        return api_error("ERR_PAYLOAD_TOO_LARGE", "Request body too large", status=413)

    @app.errorhandler(415)
    def unsupported_media_type(e):
        return api_error(
            "ERR_UNSUPPORTED_MEDIA_TYPE", "Content-Type must be application/json", status=415,
        )

    @app.errorhandler(429)
    def rate_limited(e):
        return api_error("ERR_RATE_LIMITED", "Too many requests", status=429)

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return api_error(E.INTERNAL, "Internal server error")

    return app
