from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from hankosign.database import get_db
from hankosign.errors import HankoSignError
from hankosign.modules.auth.dependencies import get_current_user, require_capability
from hankosign.modules.auth.schemas.auth_schemas import MessageResponse
from hankosign.modules.auth.services.permission import Capability
from hankosign.modules.hankos.services.hanko_service import HankoService
from hankosign.modules.hankos.schemas.hanko_schemas import (
    HankoCreate, HankoCreatedResponse, HankoListResponse
)
from hankosign.modules.users.models.user import User
from hankosign.services.storage_client import StorageClient, get_storage

router = APIRouter(prefix="/hankos", tags=["hankos"])

@router.get("", response_model=HankoListResponse)
def list_hankos(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Caller's hankos, newest first"""
    return HankoListResponse(hankos=HankoService.list_hankos(db, current_user.id))

@router.post("", response_model=HankoCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_hanko(
    payload: HankoCreate,
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(require_capability(Capability.CREATE_HANKOS))
):
    try:
        hanko = HankoService.create_hanko(db, storage, current_user.id, payload)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return HankoCreatedResponse(hanko=hanko)

@router.delete("", response_model=MessageResponse)
def delete_hanko(
    id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    if id is None:
        raise HTTPException(400, "Hanko ID is required")
    try:
        HankoService.delete_hanko(db, storage, current_user.id, id)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return MessageResponse(message="Hanko deleted successfully")
