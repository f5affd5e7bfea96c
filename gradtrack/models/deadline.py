"""
GradTrack
Deadline model.
"""

from gradtrack.models import db
from gradtrack.models.base import OwnedModel, isoformat


DEADLINE_TYPES = ("APPLICATION", "LOR", "TRANSCRIPT", "INTERVIEW", "DECISION", "OTHER")


class Deadline(OwnedModel):
    __tablename__ = "deadlines"

    title = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), nullable=False, index=True)
    date = db.Column(db.DateTime, nullable=False, index=True)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    university_id = db.Column(
        db.Integer, db.ForeignKey("universities.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )

    def to_dict(self, include_university=True):
        d = {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "type": self.type,
            "date": isoformat(self.date),
            "completed": bool(self.completed),
            "universityId": self.university_id,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        if include_university:
            d["university"] = self.university.summary() if self.university else None
        return d

    def __repr__(self):
        return f"<Deadline {self.id}: {self.title} {self.date}>"
