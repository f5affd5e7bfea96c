"""
Document service layer: application files and their version labels.
"""

import logging
import re

from gradtrack.models import db
from gradtrack.models.document import DOCUMENT_TYPES, Document
from gradtrack.services.helpers.scoped_queries import get_scoped
from gradtrack.services.validation import PayloadValidator
from gradtrack.utils.helpers import commit_or_rollback

logger = logging.getLogger(__name__)

AUTO_VERSION = "auto"
_NON_DIGITS = re.compile(r"\D")


def validate_document(data, *, partial=False) -> dict:
    v = PayloadValidator(data, partial=partial)
    v.string("name", required=True, min_length=1, max_length=200)
    v.enum("type", DOCUMENT_TYPES, required=True)
    v.string("version", min_length=1, max_length=20, default="1", nullable=False)
    v.url("fileUrl", "file_url")
    v.string("content", max_length=50000)
    return v.validate()


def next_version(user_id, doc_type, name) -> str:
    """Return the label that follows the newest same-named document of this type.

    Digits are pulled out of the previous label ("v3" → 3, "2.1" → 21);
    a label with no digits, or whose digits are zero, counts as 1. No previous
    document yields "v1".
    """
    latest = (
        Document.query_for_user(user_id)
        .filter(Document.type == doc_type, Document.name == name)
        .order_by(Document.created_at.desc(), Document.id.desc())
        .first()
    )
    if latest is None:
        return "v1"
    digits = _NON_DIGITS.sub("", latest.version or "")
    current = int(digits or 0) or 1
    return f"v{current + 1}"


def list_documents(user_id, doc_type=None) -> dict:
    q = Document.query_for_user(user_id)
    if doc_type:
        q = q.filter(Document.type == doc_type.upper())
    docs = [
        d.to_dict()
        for d in q.order_by(Document.type.asc(), Document.created_at.desc(), Document.id.desc())
    ]
    grouped: dict[str, list] = {}
    for d in docs:
        grouped.setdefault(d["type"], []).append(d)
    return {"documents": docs, "groupedDocuments": grouped}


def get_document(user_id, document_id) -> dict:
    return get_scoped(Document, document_id, user_id=user_id).to_dict()


def create_document(user_id, data) -> dict:
    cleaned = validate_document(data)
    if cleaned.get("version", "").lower() == AUTO_VERSION:
        cleaned["version"] = next_version(user_id, cleaned["type"], cleaned["name"])

    doc = Document(user_id=user_id, **cleaned)
    db.session.add(doc)
    commit_or_rollback()
    logger.info("Document created id=%s user=%s type=%s version=%s",
                doc.id, user_id, doc.type, doc.version)
    return doc.to_dict()


def update_document(user_id, document_id, data) -> dict:
    doc = get_scoped(Document, document_id, user_id=user_id)
    cleaned = validate_document(data, partial=True)
    if cleaned.get("version", "").lower() == AUTO_VERSION:
        cleaned["version"] = next_version(
            user_id, cleaned.get("type", doc.type), cleaned.get("name", doc.name),
        )

    for attr, value in cleaned.items():
        setattr(doc, attr, value)
    doc.touch()
    commit_or_rollback()
    logger.info("Document updated id=%s user=%s", doc.id, user_id)
    return doc.to_dict()


def delete_document(user_id, document_id) -> None:
    doc = get_scoped(Document, document_id, user_id=user_id)
    db.session.delete(doc)
    commit_or_rollback()
    logger.info("Document deleted id=%s user=%s", document_id, user_id)


def document_stats(user_id) -> dict:
    summary = {t: 0 for t in DOCUMENT_TYPES}
    total = 0
    for (doc_type,) in db.session.query(Document.type).filter(Document.user_id == user_id):
        summary[doc_type] = summary.get(doc_type, 0) + 1
        total += 1
    return {"summary": summary, "totalCount": total}
