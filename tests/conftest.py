"""
Shared pytest fixtures for the GradTrack test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - auth_headers / other_headers: bearer headers for two registered users
    - days_from_now: ISO timestamp helper for date-relative fixtures
"""

from datetime import timedelta

import pytest

from gradtrack import create_app
from gradtrack.models import db as _db
from gradtrack.models.base import utcnow


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Auth fixtures ────────────────────────────────────────────────────────


def register(client, email, password="secret-pass-1", name=None):
    res = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "name": name},
    )
    assert res.status_code == 201, res.get_json()
    return res.get_json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(client):
    """Factory: register a user and return its bearer headers."""
    def _make(email, password="secret-pass-1", name=None):
        return bearer(register(client, email, password, name)["token"])
    return _make


@pytest.fixture()
def user(client):
    """Registered primary user: ``{"token", "user"}``."""
    return register(client, "alice@example.com", name="Alice")


@pytest.fixture()
def auth_headers(user):
    return bearer(user["token"])


@pytest.fixture()
def other_headers(client):
    """Bearer headers for a second, unrelated user."""
    return bearer(register(client, "bob@example.com", name="Bob")["token"])


# ── Data helpers ─────────────────────────────────────────────────────────


def iso_days_from_now(days, hours=0):
    return (utcnow() + timedelta(days=days, hours=hours)).isoformat()


@pytest.fixture()
def days_from_now():
    return iso_days_from_now


@pytest.fixture()
def university(client, auth_headers):
    """A TARGET university owned by the primary user."""
    res = client.post(
        "/api/v1/universities",
        json={"name": "MIT", "category": "target", "url": "https://www.mit.edu/admissions"},
        headers=auth_headers,
    )
    assert res.status_code == 201, res.get_json()
    return res.get_json()["university"]
