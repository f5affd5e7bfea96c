"""
GradTrack
Task model.

A task is a to-do item, optionally tied to a university. Status drives the
Kanban columns; ``completed_at`` is kept in step with status by the service
layer (set on entering COMPLETED, cleared on leaving it).
"""

from gradtrack.models import db
from gradtrack.models.base import OwnedModel, isoformat


# ── Constants ────────────────────────────────────────────────────────────────

TASK_STATUSES = ("PENDING", "IN_PROGRESS", "COMPLETED", "CANCELLED")
TASK_PRIORITIES = ("LOW", "MEDIUM", "HIGH", "URGENT")

PRIORITY_RANK = {"URGENT": 4, "HIGH": 3, "MEDIUM": 2, "LOW": 1}


class Task(OwnedModel):
    __tablename__ = "tasks"

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default="PENDING", index=True)
    priority = db.Column(db.String(10), nullable=False, default="MEDIUM", index=True)
    due_date = db.Column(db.DateTime)
    completed_at = db.Column(db.DateTime)
    university_id = db.Column(
        db.Integer, db.ForeignKey("universities.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )

    def to_dict(self, include_university=True):
        d = {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "dueDate": isoformat(self.due_date),
            "completedAt": isoformat(self.completed_at),
            "universityId": self.university_id,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        if include_university:
            d["university"] = self.university.summary() if self.university else None
        return d

    def __repr__(self):
        return f"<Task {self.id}: {self.title} [{self.status}]>"
