import logging
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from hankosign.errors import ValidationError
from hankosign.modules.audit.services.audit_service import AuditAction, AuditService
from hankosign.modules.documents.models.document import Document, DocumentStatus, NON_SIGNABLE_STATUSES
from hankosign.modules.documents.services.document_service import DocumentService

logger = logging.getLogger(__name__)

class DocumentStateService:

    @staticmethod
    def can_change_state(document: Document, new_state: DocumentStatus) -> bool:
        """
        Manual transition rules available to the document owner
        """
        current_state = document.status

        if new_state == DocumentStatus.PENDING:
            return current_state == DocumentStatus.DRAFT

        if new_state == DocumentStatus.COMPLETED:
            return current_state in (DocumentStatus.PENDING, DocumentStatus.IN_PROGRESS)

        if new_state == DocumentStatus.REJECTED:
            return current_state not in NON_SIGNABLE_STATUSES

        if new_state == DocumentStatus.ARCHIVED:
            return current_state != DocumentStatus.ARCHIVED

        # DRAFT and IN_PROGRESS are never entered by hand
        return False

    @staticmethod
    def get_allowed_transitions(document: Document) -> List[DocumentStatus]:
        return [state for state in DocumentStatus if DocumentStateService.can_change_state(document, state)]

    @staticmethod
    def change_document_state(session: Session, user_id: int, document_id: int,
                              new_state: DocumentStatus) -> Document:
        """
        Changes the status of an owned document and records the change
        """
        document = DocumentService.get_owned_document(session, user_id, document_id)

        if not DocumentStateService.can_change_state(document, new_state):
            raise ValidationError(
                f"Cannot change document status from {document.status.value} to {new_state.value}"
            )

        previous_state = document.status
        document.status = new_state
        if new_state == DocumentStatus.COMPLETED:
            document.completed_at = datetime.utcnow()

        AuditService(session).record(
            AuditAction.DOCUMENT_STATUS_CHANGED,
            "Document",
            document.id,
            user_id=user_id,
            details={"from": previous_state.value, "to": new_state.value},
        )
        session.commit()
        session.refresh(document)

        logger.info(f"Document {document.id} changed from {previous_state.value} to {new_state.value}")
        return document
