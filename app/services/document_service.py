import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import literal_column, or_
from sqlalchemy.orm import Session

from app.config import settings
from app.models.document import Document, DocumentStatus
from app.models.user import User
from app.services import lifecycle
from app.services.errors import InvalidState, NotFound, RecipientNotFound
from app.services.user_service import get_user, get_user_by_email
from app.utils.payload import encode_data_url, sanitize_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilePayload:
    filename: str
    content_type: str | None
    content: bytes


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def list_documents(db: Session, principal_id: str) -> list[Document]:
    """Every document the principal sent or received, in store order."""
    return (
        db.query(Document)
        .filter(or_(Document.sender_id == principal_id, Document.recipient_id == principal_id))
        .order_by(literal_column("documents.rowid"))
        .all()
    )


def inbox_and_sent(db: Session, principal_id: str) -> lifecycle.Partition:
    return lifecycle.partition(list_documents(db, principal_id), principal_id)


def get_document(db: Session, document_id: str, principal_id: str) -> tuple[Document, lifecycle.Access]:
    doc = db.query(Document).filter(Document.id == document_id).first()
    if doc is None:
        raise NotFound("Document not found")
    access = lifecycle.authorize(principal_id, doc)
    if access is lifecycle.Access.FORBIDDEN:
        # Same answer as a missing document so ids of others' documents are not confirmed.
        raise NotFound("Document not found")
    return doc, access


def resolve_recipient(db: Session, recipient_id: str | None = None, recipient_email: str | None = None) -> User:
    recipient = None
    if recipient_id:
        recipient = get_user(db, recipient_id)
    elif recipient_email:
        recipient = get_user_by_email(db, recipient_email)
    if recipient is None:
        raise RecipientNotFound("Recipient is not a registered user")
    return recipient


def create_document(
    db: Session,
    sender_id: str,
    title: str | None,
    recipient_id: str | None = None,
    recipient_email: str | None = None,
    file: FilePayload | None = None,
) -> Document:
    recipient = resolve_recipient(db, recipient_id, recipient_email)

    doc = Document(
        id=str(uuid.uuid4()),
        title=(title or "").strip() or settings.default_document_title,
        sender_id=sender_id,
        recipient_id=recipient.id,
        status=DocumentStatus.PENDING.value,
        requested_at=_now(),
        signed_at=None,
    )
    if file is not None:
        doc.file_name = sanitize_filename(file.filename) if file.filename else None
        doc.file_type = file.content_type
        doc.file_data = encode_data_url(file.content, file.content_type)

    db.add(doc)
    db.commit()
    db.refresh(doc)
    logger.info("Document %s sent by %s to %s", doc.id, sender_id, recipient.id)
    return doc


def sign_document(
    db: Session,
    document_id: str,
    principal_id: str,
    payload: lifecycle.SignaturePayload,
) -> Document:
    doc = db.query(Document).filter(Document.id == document_id).first()
    update = lifecycle.check_sign(doc, principal_id, payload, _now())

    # Conditional write: only the request that still sees PENDING wins.
    updated = (
        db.query(Document)
        .filter(Document.id == document_id, Document.status == DocumentStatus.PENDING.value)
        .update(
            {
                Document.status: update.status.value,
                Document.signed_at: update.signed_at,
                Document.signature_mode: update.signature_mode.value,
                Document.signature_text: update.signature_text,
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        logger.info("Lost sign race on document %s", document_id)
        raise InvalidState("Document is no longer PENDING")

    db.commit()
    db.refresh(doc)
    logger.info("Document %s signed by %s", document_id, principal_id)
    return doc


def complete_document(db: Session, document_id: str, principal_id: str) -> Document:
    doc = db.query(Document).filter(Document.id == document_id).first()
    update = lifecycle.check_complete(doc, principal_id, _now())

    updated = (
        db.query(Document)
        .filter(Document.id == document_id, Document.status == DocumentStatus.SIGNED.value)
        .update(
            {
                Document.status: update.status.value,
                Document.completed_at: update.completed_at,
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        raise InvalidState("Document is no longer SIGNED")

    db.commit()
    db.refresh(doc)
    logger.info("Document %s completed by %s", document_id, principal_id)
    return doc
