"""
GradTrack
University domain models.

Models:
    - University: a program the user researches or applies to
    - Requirement: checklist item attached to a university (test scores, essays...)

Ownership chain: User → University → Requirement
Tasks and Deadlines may optionally point at a University; deleting the
university detaches them (university_id → NULL).
"""

from gradtrack.models import db
from gradtrack.models.base import OwnedModel, isoformat


# ── Constants ────────────────────────────────────────────────────────────────

UNIVERSITY_STATUSES = (
    "RESEARCHING", "PLANNING_TO_APPLY", "APPLIED", "ADMITTED", "REJECTED", "WAITLISTED",
)
UNIVERSITY_CATEGORIES = ("REACH", "TARGET", "SAFETY")


class University(OwnedModel):
    """
    A university program tracked by a user.

    ``deadline`` is the application deadline; ``lor_deadline`` is the
    recommendation-letter deadline. Both are optional.
    """

    __tablename__ = "universities"

    name = db.Column(db.String(200), nullable=False)
    url = db.Column(db.String(500))
    status = db.Column(db.String(30), nullable=False, default="RESEARCHING", index=True)
    category = db.Column(db.String(20), nullable=False, index=True)
    deadline = db.Column(db.DateTime)
    lor_deadline = db.Column(db.DateTime)
    notes = db.Column(db.Text)

    requirements = db.relationship(
        "Requirement", backref="university", cascade="all, delete-orphan",
        order_by="Requirement.id",
    )
    tasks = db.relationship("Task", backref="university", lazy="select")
    deadlines = db.relationship("Deadline", backref="university", lazy="select")

    def summary(self):
        return {"id": self.id, "name": self.name, "category": self.category}

    def to_dict(self, detail=False):
        """Serialize; list views carry only open tasks and incomplete deadlines."""
        tasks = self.tasks if detail else [t for t in self.tasks if t.status != "COMPLETED"]
        deadlines = self.deadlines if detail else [d for d in self.deadlines if not d.completed]
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "url": self.url,
            "status": self.status,
            "category": self.category,
            "deadline": isoformat(self.deadline),
            "lorDeadline": isoformat(self.lor_deadline),
            "notes": self.notes,
            "requirements": [r.to_dict() for r in self.requirements],
            "tasks": [t.to_dict(include_university=False) for t in tasks],
            "deadlines": [
                d.to_dict(include_university=False)
                for d in sorted(deadlines, key=lambda d: d.date)
            ],
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<University {self.id}: {self.name}>"


class Requirement(db.Model):
    __tablename__ = "requirements"

    id = db.Column(db.Integer, primary_key=True)
    university_id = db.Column(
        db.Integer, db.ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title = db.Column(db.String(200), nullable=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    notes = db.Column(db.Text)

    def to_dict(self):
        return {
            "id": self.id,
            "universityId": self.university_id,
            "title": self.title,
            "completed": bool(self.completed),
            "notes": self.notes,
        }

    def __repr__(self):
        return f"<Requirement {self.id}: {self.title}>"
