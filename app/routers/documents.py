from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies import require_session
from app.models.document import Document, DocumentStatus
from app.routers.users import user_to_response
from app.schemas.document import DashboardResponse, DocumentResponse, SignRequest
from app.services import document_service
from app.services.auth_service import SessionContext
from app.services.document_service import FilePayload
from app.services.lifecycle import Access, SignaturePayload, authorize, status_label
from app.services.pdf_service import generate_summary_pdf
from app.utils.payload import decode_data_url

router = APIRouter(prefix="/documents", tags=["documents"])


def _doc_to_response(doc: Document, principal_id: str) -> DocumentResponse:
    access = authorize(principal_id, doc)
    return DocumentResponse(
        id=doc.id,
        title=doc.title,
        sender_id=doc.sender_id,
        recipient_id=doc.recipient_id,
        sender=user_to_response(doc.sender) if doc.sender else None,
        recipient=user_to_response(doc.recipient) if doc.recipient else None,
        status=DocumentStatus(doc.status),
        status_label=status_label(doc.status),
        requested_at=doc.requested_at,
        signed_at=doc.signed_at,
        completed_at=doc.completed_at,
        signature_mode=doc.signature_mode,
        file_name=doc.file_name,
        file_type=doc.file_type,
        has_file=doc.file_data is not None,
        access=None if access is Access.FORBIDDEN else access,
    )


@router.get("", response_model=list[DocumentResponse])
async def list_documents(
    context: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    docs = document_service.list_documents(db, context.user_id)
    return [_doc_to_response(d, context.user_id) for d in docs]


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    context: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    split = document_service.inbox_and_sent(db, context.user_id)
    return DashboardResponse(
        inbox=[_doc_to_response(d, context.user_id) for d in split.inbox],
        sent=[_doc_to_response(d, context.user_id) for d in split.sent],
    )


@router.post("", response_model=DocumentResponse, status_code=201)
async def create_document(
    title: str = Form(""),
    recipient_id: str | None = Form(None),
    recipient_email: str | None = Form(None),
    file: UploadFile | None = File(None),
    context: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    if not recipient_id and not recipient_email:
        raise HTTPException(status_code=400, detail="Provide recipient_id or recipient_email")

    payload = None
    if file is not None and file.filename:
        max_bytes = settings.max_upload_bytes
        size = 0
        chunks: list[bytes] = []
        while True:
            chunk = await file.read(1024 * 1024)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                raise HTTPException(status_code=413, detail=f"File too large (max {max_bytes} bytes)")
            chunks.append(chunk)
        payload = FilePayload(
            filename=file.filename,
            content_type=file.content_type,
            content=b"".join(chunks),
        )

    doc = document_service.create_document(
        db,
        sender_id=context.user_id,
        title=title,
        recipient_id=recipient_id,
        recipient_email=recipient_email,
        file=payload,
    )
    return _doc_to_response(doc, context.user_id)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    context: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    doc, _access = document_service.get_document(db, document_id, context.user_id)
    return _doc_to_response(doc, context.user_id)


@router.post("/{document_id}/sign", response_model=DocumentResponse)
async def sign_document(
    document_id: str,
    req: SignRequest,
    context: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    doc = document_service.sign_document(
        db,
        document_id,
        context.user_id,
        SignaturePayload(mode=req.mode, text=req.text, strokes_complete=req.strokes_complete),
    )
    return _doc_to_response(doc, context.user_id)


@router.post("/{document_id}/complete", response_model=DocumentResponse)
async def complete_document(
    document_id: str,
    context: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    doc = document_service.complete_document(db, document_id, context.user_id)
    return _doc_to_response(doc, context.user_id)


@router.get("/{document_id}/file")
async def download_file(
    document_id: str,
    context: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    doc, _access = document_service.get_document(db, document_id, context.user_id)
    if not doc.file_data:
        raise HTTPException(status_code=404, detail="Document has no attached file")
    try:
        media_type, content = decode_data_url(doc.file_data)
    except ValueError:
        raise HTTPException(status_code=500, detail="Stored file payload is corrupt")

    filename = doc.file_name or "document"
    return Response(
        content=content,
        media_type=doc.file_type or media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{document_id}/summary.pdf")
async def summary_pdf(
    document_id: str,
    context: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    doc, _access = document_service.get_document(db, document_id, context.user_id)
    return Response(
        content=generate_summary_pdf(doc),
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{doc.id}.pdf"'},
    )
