from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

class AuditLogResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    entity_type: str
    entity_id: str
    details: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = {"from_attributes": True}

class AuditLogListResponse(BaseModel):
    audit_logs: List[AuditLogResponse]
    total: int
