"""
OwnedModel: abstract base class for user-owned models.

Every tracker entity belongs to exactly one user. Inheriting from
OwnedModel instead of db.Model directly adds:
  - user_id FK column with index
  - created_at / updated_at columns (naive UTC)
  - query_for_user(user_id) classmethod
"""

from datetime import datetime, timezone

from gradtrack.models import db


def utcnow() -> datetime:
    """Current time as naive UTC, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None


class OwnedModel(db.Model):
    """Abstract base for user-scoped tables."""
    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Both stamps get the same instant on insert; equality means "never updated".
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __init__(self, **kwargs):
        now = utcnow()
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        super().__init__(**kwargs)

    @classmethod
    def query_for_user(cls, user_id):
        """Return a query filtered by user_id."""
        return cls.query.filter_by(user_id=user_id)

    def touch(self):
        self.updated_at = utcnow()
