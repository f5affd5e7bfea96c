"""
University service layer.

Centralises ORM queries and mutations for University and its
Requirements so that blueprints remain HTTP-only. Every commit in this
module is intentional and owns the transaction.
"""

import logging

from gradtrack.core.exceptions import InvalidReferenceError
from gradtrack.models import db
from gradtrack.models.university import (
    UNIVERSITY_CATEGORIES,
    UNIVERSITY_STATUSES,
    Requirement,
    University,
)
from gradtrack.services.helpers.scoped_queries import get_scoped
from gradtrack.services.validation import PayloadValidator
from gradtrack.utils.helpers import commit_or_rollback

logger = logging.getLogger(__name__)


def _requirement_rules(v: PayloadValidator):
    v.string("title", required=True, min_length=1, max_length=200)
    v.boolean("completed", default=False)
    v.string("notes", max_length=1000)


def validate_university(data, *, partial=False) -> dict:
    v = PayloadValidator(data, partial=partial)
    v.string("name", required=True, min_length=1, max_length=200)
    v.url("url", max_length=500)
    v.enum("status", UNIVERSITY_STATUSES, default="RESEARCHING", nullable=False)
    v.enum("category", UNIVERSITY_CATEGORIES, required=True)
    v.datetime("deadline")
    v.datetime("lorDeadline", "lor_deadline")
    v.string("notes", max_length=1000)
    v.nested_list("requirements", _requirement_rules)
    return v.validate()


def list_universities(user_id, status=None, category=None) -> list[dict]:
    q = University.query_for_user(user_id)
    if status:
        q = q.filter(University.status == status.upper())
    if category:
        q = q.filter(University.category == category.upper())
    items = q.order_by(University.created_at.desc(), University.id.desc()).all()
    return [u.to_dict() for u in items]


def get_university(user_id, university_id) -> dict:
    return get_scoped(University, university_id, user_id=user_id).to_dict(detail=True)


def _requirements_from(items):
    return [
        Requirement(
            title=item["title"],
            completed=item.get("completed", False),
            notes=item.get("notes"),
        )
        for item in items
    ]


def create_university(user_id, data) -> dict:
    cleaned = validate_university(data)
    requirements = cleaned.pop("requirements", [])

    uni = University(user_id=user_id, **cleaned)
    uni.requirements = _requirements_from(requirements)
    db.session.add(uni)
    commit_or_rollback()
    logger.info("University created id=%s user=%s", uni.id, user_id)
    return uni.to_dict(detail=True)


def update_university(user_id, university_id, data) -> dict:
    """Partial update. ``requirements``, when supplied, replaces the whole list."""
    uni = get_scoped(University, university_id, user_id=user_id)
    cleaned = validate_university(data, partial=True)
    requirements = cleaned.pop("requirements", None)

    for attr, value in cleaned.items():
        setattr(uni, attr, value)
    if requirements is not None:
        uni.requirements = _requirements_from(requirements)
    uni.touch()
    commit_or_rollback()
    logger.info("University updated id=%s user=%s fields=%s", uni.id, user_id, sorted(cleaned))
    return uni.to_dict(detail=True)


def delete_university(user_id, university_id) -> None:
    """Delete a university; its tasks and deadlines survive, detached."""
    uni = get_scoped(University, university_id, user_id=user_id)
    for task in uni.tasks:
        task.university_id = None
    for deadline in uni.deadlines:
        deadline.university_id = None
    db.session.delete(uni)
    commit_or_rollback()
    logger.info("University deleted id=%s user=%s", university_id, user_id)


def get_owned_university(user_id, university_id):
    """Resolve a referenced university id, or None. Used for FK validation."""
    if university_id is None:
        return None
    return University.query_for_user(user_id).filter(University.id == university_id).first()


def require_owned_university(user_id, university_id) -> None:
    """Reject a ``universityId`` reference the caller does not own."""
    if university_id is not None and get_owned_university(user_id, university_id) is None:
        raise InvalidReferenceError("University", "universityId", university_id)
