"""
GradTrack
Auth model.

Models:
    - User: account that owns universities, tasks, documents and deadlines
"""

from gradtrack.models import db
from gradtrack.models.base import isoformat, utcnow


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(200), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    name = db.Column(db.String(200))
    last_login_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    universities = db.relationship(
        "University", backref="owner", lazy="dynamic", cascade="all, delete-orphan",
    )
    tasks = db.relationship("Task", backref="owner", lazy="dynamic", cascade="all, delete-orphan")
    documents = db.relationship(
        "Document", backref="owner", lazy="dynamic", cascade="all, delete-orphan",
    )
    deadlines = db.relationship(
        "Deadline", backref="owner", lazy="dynamic", cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "lastLoginAt": isoformat(self.last_login_at),
            "createdAt": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"
