import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from hankosign.modules.audit.models.audit_log import AuditLog
from hankosign.modules.audit.repositories.audit_repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditAction:
    ROLE_CHANGED = "ROLE_CHANGED"
    PROFILE_UPDATED = "PROFILE_UPDATED"
    COMPANY_INFO_UPDATED = "COMPANY_INFO_UPDATED"
    PASSWORD_CHANGED = "PASSWORD_CHANGED"
    PASSWORD_RESET_REQUESTED = "PASSWORD_RESET_REQUESTED"
    PASSWORD_RESET_COMPLETED = "PASSWORD_RESET_COMPLETED"
    DOCUMENT_SIGNED = "DOCUMENT_SIGNED"
    DOCUMENT_STATUS_CHANGED = "DOCUMENT_STATUS_CHANGED"
    WORKFLOW_CREATED = "WORKFLOW_CREATED"
    APPROVAL_APPROVED = "APPROVAL_APPROVED"
    APPROVAL_REJECTED = "APPROVAL_REJECTED"


class AuditService:
    """
    Append-only audit trail.

    Entries are added to the caller's session and become durable with the
    caller's commit, so an audited change and its entry land together.
    There is no update or delete operation.
    """

    def __init__(self, db: Session):
        self.repository = AuditRepository(db)

    def record(
        self,
        action: str,
        entity_type: str,
        entity_id: Any,
        user_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> AuditLog:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            details=details or {}
        )
        self.repository.add(entry)
        logger.info(f"Audit: {action} on {entity_type}:{entity_id} by user {user_id}")
        return entry

    def list_entries(
        self,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[AuditLog]:
        return self.repository.find(action=action, entity_type=entity_type, skip=skip, limit=limit)

    def count_entries(self, action: Optional[str] = None, entity_type: Optional[str] = None) -> int:
        return self.repository.count(action=action, entity_type=entity_type)
