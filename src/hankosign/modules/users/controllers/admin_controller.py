from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from hankosign.database import get_db
from hankosign.errors import HankoSignError
from hankosign.modules.audit.schemas.audit_schemas import AuditLogListResponse
from hankosign.modules.audit.services.audit_service import AuditService
from hankosign.modules.auth.dependencies import require_capability
from hankosign.modules.auth.services.permission import Capability
from hankosign.modules.users.models.user import User
from hankosign.modules.users.services.user_service import RoleService
from hankosign.modules.users.schemas.user_schemas import (
    RoleChangeRequest, RoleChangeResponse, UserListResponse
)

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/users", response_model=UserListResponse)
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_ROLES))
):
    """User list for the role administration screen"""
    users, total = RoleService.list_users(db, skip, limit)
    return UserListResponse(users=users, total=total)

@router.patch("/users/{user_id}/role", response_model=RoleChangeResponse)
def change_user_role(
    user_id: int,
    payload: RoleChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.MANAGE_ROLES))
):
    """Change another user's role (ADMIN / SUPER_ADMIN)"""
    try:
        user = RoleService.change_role(db, current_user, user_id, payload.role)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return RoleChangeResponse(user=user)

@router.get("/audit-logs", response_model=AuditLogListResponse)
def list_audit_logs(
    action: Optional[str] = Query(None),
    entity_type: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.VIEW_AUDIT_LOGS))
):
    service = AuditService(db)
    return AuditLogListResponse(
        audit_logs=service.list_entries(action=action, entity_type=entity_type, skip=skip, limit=limit),
        total=service.count_entries(action=action, entity_type=entity_type)
    )
