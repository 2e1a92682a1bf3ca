from app.models.user import User
from app.models.document import Document, DocumentStatus

__all__ = ["User", "Document", "DocumentStatus"]
