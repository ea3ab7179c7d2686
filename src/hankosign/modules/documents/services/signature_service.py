import logging
from typing import Optional

from sqlalchemy.orm import Session

from hankosign.errors import DocumentNotSignableError, NotFoundError
from hankosign.modules.audit.services.audit_service import AuditAction, AuditService
from hankosign.modules.documents.models.document import Document, DocumentStatus, NON_SIGNABLE_STATUSES
from hankosign.modules.documents.models.signature import Signature
from hankosign.modules.documents.schemas.document_schemas import SignatureCreate
from hankosign.modules.hankos.models.hanko import Hanko
from hankosign.modules.notifications.repositories.notification_repository import NotificationRepository
from hankosign.modules.notifications.services.notification_service import (
    DocumentSignedNotification, NotificationService
)
from hankosign.modules.users.models.user import User

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"

def resolve_client_ip(forwarded_for: Optional[str], client_host: Optional[str]) -> str:
    """First ``X-Forwarded-For`` entry, else the socket peer, else ``unknown``"""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return client_host or UNKNOWN_CLIENT

class SignatureService:

    @staticmethod
    def sign_document(
        session: Session,
        signer: User,
        data: SignatureCreate,
        ip_address: str,
        user_agent: Optional[str],
    ) -> Signature:
        """
        Stamp a hanko onto a document:
        - document must exist and still accept signatures
        - hanko must belong to the signer
        - signature, status bump, audit entry and owner notification commit together
        """
        # 1) Document
        document = session.get(Document, data.document_id)
        if not document:
            raise NotFoundError("Document not found")
        if document.status in NON_SIGNABLE_STATUSES:
            raise DocumentNotSignableError("This document cannot be signed")

        # 2) Hanko ownership
        hanko = (
            session.query(Hanko)
            .filter(Hanko.id == data.hanko_id, Hanko.user_id == signer.id)
            .first()
        )
        if not hanko:
            raise NotFoundError("Hanko not found")

        # 3) Signature row
        signature = Signature(
            document_id=document.id,
            hanko_id=hanko.id,
            user_id=signer.id,
            page=data.page,
            position_x=data.position_x,
            position_y=data.position_y,
            ip_address=ip_address or UNKNOWN_CLIENT,
            user_agent=(user_agent or UNKNOWN_CLIENT)[:512],
            is_valid=True,
        )
        session.add(signature)

        # 4) Status, audit and notification in the same transaction
        document.status = DocumentStatus.IN_PROGRESS
        session.flush()

        AuditService(session).record(
            AuditAction.DOCUMENT_SIGNED,
            "Document",
            document.id,
            user_id=signer.id,
            details={"signature_id": signature.id, "hanko_id": hanko.id, "page": data.page},
        )
        if document.created_by_id != signer.id:
            NotificationService(NotificationRepository(session)).notify(
                DocumentSignedNotification(document.created_by_id, document.title, signer.name)
            )

        session.commit()
        session.refresh(signature)

        logger.info(f"User {signer.id} signed document {document.id} with hanko {hanko.id}")
        return signature
