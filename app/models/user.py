from sqlalchemy import Column, Text
from sqlalchemy.orm import relationship
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    credential_hash = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)

    sent_documents = relationship(
        "Document", foreign_keys="Document.sender_id", back_populates="sender"
    )
    received_documents = relationship(
        "Document", foreign_keys="Document.recipient_id", back_populates="recipient"
    )
