"""
User Service: registration, login and profile lookup.
"""

import logging

from email_validator import EmailNotValidError, validate_email

from gradtrack.core.exceptions import AuthenticationError, ConflictError
from gradtrack.models import db
from gradtrack.models.auth import User
from gradtrack.models.base import utcnow
from gradtrack.services.jwt_service import generate_access_token
from gradtrack.services.validation import PayloadValidator
from gradtrack.utils.crypto import hash_password, verify_password
from gradtrack.utils.helpers import commit_or_rollback

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def _normalize_email(v: PayloadValidator, field="email"):
    raw = v.data.get(field)
    if not isinstance(raw, str) or not raw.strip():
        v.add_error(field, f"{field} is required")
        return None
    try:
        valid = validate_email(raw.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        v.add_error(field, f"Invalid email: {e}")
        return None
    return valid.normalized.lower()


def register_user(data: dict) -> dict:
    """Create a new account and return ``{"token", "user"}``.

    Raises:
        ValidationError: bad email / short password.
        ConflictError: email already registered.
    """
    v = PayloadValidator(data)
    email = _normalize_email(v)
    password = v.data.get("password")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        v.add_error("password", f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    v.string("name", max_length=200)
    cleaned = v.validate()

    if User.query.filter_by(email=email).first():
        raise ConflictError("User", "email", email)

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=cleaned.get("name"),
    )
    db.session.add(user)
    commit_or_rollback()
    logger.info("User registered id=%s", user.id)
    return {"token": generate_access_token(user.id), "user": user.to_dict()}


def login_user(data: dict) -> dict:
    """Verify credentials and return ``{"token", "user"}``.

    Unknown email and wrong password are reported identically.
    """
    if not isinstance(data, dict):
        data = {}
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        raise AuthenticationError("Email and password are required")

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt email=%s", email)
        raise AuthenticationError("Invalid email or password")

    user.last_login_at = utcnow()
    commit_or_rollback()
    return {"token": generate_access_token(user.id), "user": user.to_dict()}


def get_user_by_id(user_id) -> User | None:
    if user_id is None:
        return None
    return db.session.get(User, user_id)
