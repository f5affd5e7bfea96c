"""
User-scoped query helpers.

Every get-by-id in GradTrack MUST go through these helpers instead of
Model.query.get(pk) or db.session.get(Model, pk). Direct .get() calls
bypass ownership isolation.

Usage:
    uni = get_scoped(University, university_id, user_id=user_id)

    # When None is an acceptable outcome (optional FK lookups)
    uni = get_scoped_or_none(University, university_id, user_id=user_id)
"""

import logging

from sqlalchemy import select

from gradtrack.core.exceptions import NotFoundError
from gradtrack.models import db

logger = logging.getLogger(__name__)


def get_scoped(model, pk, *, user_id):
    """Fetch a single entity by PK, restricted to rows owned by ``user_id``.

    Access to another user's row is indistinguishable from a missing record:
    both raise NotFoundError → HTTP 404.

    Raises:
        ValueError: If ``user_id`` is None or the model has no user_id column.
        NotFoundError: If the entity does not exist OR belongs to another user.
    """
    if user_id is None:
        raise ValueError(
            f"{model.__name__} id={pk} requires a user_id scope. "
            "Unscoped lookups are forbidden."
        )
    if not hasattr(model, "user_id"):
        raise ValueError(f"{model.__name__} has no user_id column; refusing unscoped lookup.")

    stmt = select(model).where(model.id == pk, model.user_id == user_id)
    result = db.session.execute(stmt).scalar_one_or_none()

    if result is None:
        logger.debug("get_scoped: %s id=%s not found for user=%s", model.__name__, pk, user_id)
        raise NotFoundError(resource=model.__name__, resource_id=pk, user_id=user_id)

    return result


def get_scoped_or_none(model, pk, *, user_id):
    """Same as get_scoped but returns None instead of raising NotFoundError."""
    try:
        return get_scoped(model, pk, user_id=user_id)
    except NotFoundError:
        return None
