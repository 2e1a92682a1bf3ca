"""
Document lifecycle and authorization rules.

Pure functions over document snapshots: who may see a document, which
status moves are legal, and what a successful sign or complete writes.
Nothing here touches the database; document_service applies the result.
"""
import enum
from dataclasses import dataclass
from typing import Iterable, Protocol

from app.models.document import DocumentStatus
from app.services.errors import Forbidden, InvalidState, NotFound, ValidationError


class Access(str, enum.Enum):
    VIEWABLE_AS_SENDER = "sender"
    VIEWABLE_AS_RECIPIENT = "recipient"
    FORBIDDEN = "forbidden"


class SignatureMode(str, enum.Enum):
    TYPED = "typed"
    DRAWN = "drawn"


class DocumentLike(Protocol):
    id: str
    sender_id: str
    recipient_id: str
    status: str


@dataclass(frozen=True)
class SignaturePayload:
    mode: SignatureMode
    text: str | None = None
    strokes_complete: bool = False


@dataclass(frozen=True)
class SignUpdate:
    status: DocumentStatus
    signed_at: str
    signature_mode: SignatureMode
    signature_text: str | None


@dataclass(frozen=True)
class CompleteUpdate:
    status: DocumentStatus
    completed_at: str


@dataclass
class Partition:
    inbox: list
    sent: list


_NEXT_STATUS: dict[DocumentStatus, DocumentStatus | None] = {
    DocumentStatus.PENDING: DocumentStatus.SIGNED,
    DocumentStatus.SIGNED: DocumentStatus.COMPLETED,
    DocumentStatus.COMPLETED: None,
}

_STATUS_LABELS: dict[DocumentStatus, str] = {
    DocumentStatus.PENDING: "Awaiting signature",
    DocumentStatus.SIGNED: "Signed",
    DocumentStatus.COMPLETED: "Completed",
}


def parse_status(value: str | DocumentStatus) -> DocumentStatus:
    try:
        return DocumentStatus(value)
    except ValueError:
        raise InvalidState(f"Unrecognized document status: {value!r}") from None


def status_label(status: str | DocumentStatus) -> str:
    return _STATUS_LABELS[parse_status(status)]


def authorize(principal_id: str | None, document: DocumentLike) -> Access:
    """Classify how (and whether) a principal may view a document."""
    if principal_id is None:
        return Access.FORBIDDEN
    if principal_id == document.sender_id:
        return Access.VIEWABLE_AS_SENDER
    if principal_id == document.recipient_id:
        return Access.VIEWABLE_AS_RECIPIENT
    return Access.FORBIDDEN


def ensure_transition(current: str | DocumentStatus, target: str | DocumentStatus) -> DocumentStatus:
    """Raise InvalidState unless ``target`` is the next forward status."""
    current = parse_status(current)
    target = parse_status(target)
    if _NEXT_STATUS[current] is not target:
        raise InvalidState(f"Cannot move document from {current.value} to {target.value}")
    return target


def validate_signature(payload: SignaturePayload) -> None:
    if payload.mode is SignatureMode.TYPED:
        if not payload.text or not payload.text.strip():
            raise ValidationError("Typed signature must not be empty")
    elif payload.mode is SignatureMode.DRAWN:
        if not payload.strokes_complete:
            raise ValidationError("Drawn signature is not complete")
    else:
        raise ValidationError(f"Unknown signature mode: {payload.mode!r}")


def check_sign(
    document: DocumentLike | None,
    principal_id: str,
    payload: SignaturePayload,
    now: str,
) -> SignUpdate:
    """Validate a sign request; the first failing precondition wins."""
    if document is None:
        raise NotFound("Document not found")
    if principal_id != document.recipient_id:
        raise Forbidden("Only the recipient may sign this document")
    current = parse_status(document.status)
    if current is not DocumentStatus.PENDING:
        raise InvalidState(f"Document is already {current.value}")
    validate_signature(payload)

    return SignUpdate(
        status=ensure_transition(current, DocumentStatus.SIGNED),
        signed_at=now,
        signature_mode=payload.mode,
        signature_text=payload.text.strip() if payload.mode is SignatureMode.TYPED else None,
    )


def check_complete(document: DocumentLike | None, principal_id: str, now: str) -> CompleteUpdate:
    if document is None:
        raise NotFound("Document not found")
    if principal_id != document.sender_id:
        raise Forbidden("Only the sender may complete this document")
    return CompleteUpdate(
        status=ensure_transition(document.status, DocumentStatus.COMPLETED),
        completed_at=now,
    )


def partition(documents: Iterable[DocumentLike], principal_id: str) -> Partition:
    """Split documents into the principal's pending inbox and sent list."""
    result = Partition(inbox=[], sent=[])
    for doc in documents:
        if doc.recipient_id == principal_id and parse_status(doc.status) is DocumentStatus.PENDING:
            result.inbox.append(doc)
        if doc.sender_id == principal_id:
            result.sent.append(doc)
    return result
