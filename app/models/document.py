import enum

from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.database import Base


class DocumentStatus(str, enum.Enum):
    PENDING = "PENDING"
    SIGNED = "SIGNED"
    COMPLETED = "COMPLETED"


class Document(Base):
    __tablename__ = "documents"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    sender_id = Column(Text, ForeignKey("users.id"), nullable=False)
    recipient_id = Column(Text, ForeignKey("users.id"), nullable=False)
    status = Column(Text, nullable=False, default=DocumentStatus.PENDING.value)
    requested_at = Column(Text, nullable=False)
    signed_at = Column(Text, nullable=True)
    completed_at = Column(Text, nullable=True)
    signature_mode = Column(Text, nullable=True)
    signature_text = Column(Text, nullable=True)
    file_data = Column(Text, nullable=True)
    file_name = Column(Text, nullable=True)
    file_type = Column(Text, nullable=True)

    sender = relationship("User", foreign_keys=[sender_id], back_populates="sent_documents")
    recipient = relationship("User", foreign_keys=[recipient_id], back_populates="received_documents")
