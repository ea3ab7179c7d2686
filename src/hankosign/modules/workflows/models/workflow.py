from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from hankosign.database import Base

class ApprovalStatus(PyEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

class Workflow(Base):
    __tablename__ = 'workflows'

    id = Column(Integer, primary_key=True)
    document_id = Column(Integer, ForeignKey('documents.id'), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    current_step = Column(Integer, nullable=False, default=0)
    total_steps = Column(Integer, nullable=False)
    is_sequential = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    document = relationship("Document", back_populates="workflow")
    approvals = relationship(
        "Approval",
        back_populates="workflow",
        order_by="Approval.order",
        cascade="all, delete-orphan"
    )

class Approval(Base):
    __tablename__ = 'approvals'

    id = Column(Integer, primary_key=True)
    workflow_id = Column(Integer, ForeignKey('workflows.id'), nullable=False, index=True)
    document_id = Column(Integer, ForeignKey('documents.id'), nullable=False)
    approver_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    order = Column(Integer, nullable=False)
    status = Column(Enum(ApprovalStatus), nullable=False, default=ApprovalStatus.PENDING)
    due_date = Column(DateTime, nullable=True)
    comment = Column(Text, nullable=True)
    acted_at = Column(DateTime, nullable=True)
    overdue_notified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    workflow = relationship("Workflow", back_populates="approvals")
    approver = relationship("User")
    document = relationship("Document")
