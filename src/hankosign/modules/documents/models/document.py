from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from hankosign.database import Base

class DocumentStatus(PyEnum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    ARCHIVED = "ARCHIVED"

# A document in one of these states accepts no new signature
NON_SIGNABLE_STATUSES = frozenset({
    DocumentStatus.COMPLETED,
    DocumentStatus.REJECTED,
    DocumentStatus.ARCHIVED,
})

class Document(Base):
    __tablename__ = 'documents'

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    file_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(255), nullable=False)
    file_key = Column(String(1024), nullable=False)
    file_url = Column(String(1024), nullable=False)
    page_count = Column(Integer, nullable=True)
    status = Column(Enum(DocumentStatus), nullable=False, default=DocumentStatus.DRAFT)
    verification_code = Column(String(14), unique=True, nullable=False, index=True)
    template_type = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    created_by_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    created_by = relationship("User", back_populates="documents")

    signatures = relationship(
        "Signature",
        back_populates="document",
        order_by="Signature.timestamp",
        cascade="all, delete-orphan"
    )
    workflow = relationship(
        "Workflow",
        back_populates="document",
        uselist=False,
        cascade="all, delete-orphan"
    )
