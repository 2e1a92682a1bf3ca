from pydantic import BaseModel, model_validator

from app.models.document import DocumentStatus
from app.schemas.user import UserResponse
from app.services.lifecycle import Access, SignatureMode


class DocumentResponse(BaseModel):
    id: str
    title: str
    sender_id: str
    recipient_id: str
    sender: UserResponse | None = None
    recipient: UserResponse | None = None
    status: DocumentStatus
    status_label: str
    requested_at: str
    signed_at: str | None
    completed_at: str | None
    signature_mode: SignatureMode | None
    file_name: str | None
    file_type: str | None
    has_file: bool = False
    access: Access | None = None


class DashboardResponse(BaseModel):
    inbox: list[DocumentResponse]
    sent: list[DocumentResponse]


class SignRequest(BaseModel):
    mode: SignatureMode = SignatureMode.TYPED
    text: str | None = None
    strokes_complete: bool = False

    @model_validator(mode="after")
    def check_payload(self):
        # Rejected before any lookup so an empty signature never reaches the store.
        if self.mode is SignatureMode.TYPED and not (self.text and self.text.strip()):
            raise ValueError("Typed signature must not be empty")
        if self.mode is SignatureMode.DRAWN and not self.strokes_complete:
            raise ValueError("Drawn signature is not complete")
        return self
