"""
GradTrack
Document model: SOPs, CVs, recommendation letters and other application files.

Each upload is its own row; versions of the "same" document share
user + type + name and differ by ``version`` label.
"""

from gradtrack.models import db
from gradtrack.models.base import OwnedModel, isoformat


DOCUMENT_TYPES = ("SOP", "CV", "RESUME", "LOR", "TRANSCRIPT", "OTHER")


class Document(OwnedModel):
    __tablename__ = "documents"

    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), nullable=False, index=True)
    version = db.Column(db.String(20), nullable=False, default="1")
    file_url = db.Column(db.String(1000))
    content = db.Column(db.Text)

    __table_args__ = (
        db.Index("ix_documents_user_type_name", "user_id", "type", "name"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "type": self.type,
            "version": self.version,
            "fileUrl": self.file_url,
            "content": self.content,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Document {self.id}: {self.type} {self.name} {self.version}>"
