from typing import List, Optional
from sqlalchemy.orm import Session

from hankosign.modules.audit.models.audit_log import AuditLog

class AuditRepository:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add(self, entry: AuditLog) -> AuditLog:
        # Not committed here; persisted by the caller's commit
        self.db.add(entry)
        return entry

    def find(
        self,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[AuditLog]:
        query = self.db.query(AuditLog)
        if action is not None:
            query = query.filter(AuditLog.action == action)
        if entity_type is not None:
            query = query.filter(AuditLog.entity_type == entity_type)
        return (
            query
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, action: Optional[str] = None, entity_type: Optional[str] = None) -> int:
        query = self.db.query(AuditLog)
        if action is not None:
            query = query.filter(AuditLog.action == action)
        if entity_type is not None:
            query = query.filter(AuditLog.entity_type == entity_type)
        return query.count()
