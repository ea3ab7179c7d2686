from typing import Optional
from fastapi import APIRouter, UploadFile, File, Form, HTTPException, Depends, Query, status
from sqlalchemy.orm import Session
from hankosign.database import get_db
from hankosign.errors import HankoSignError
from hankosign.modules.auth.dependencies import get_current_user, require_capability
from hankosign.modules.auth.schemas.auth_schemas import MessageResponse
from hankosign.modules.auth.services.permission import Capability
from hankosign.modules.documents.schemas.document_schemas import (
    DocumentCreatedResponse, DocumentListResponse, DocumentResponse, DownloadUrlResponse,
    StatusChangeRequest
)
from hankosign.modules.documents.services.document_service import DOWNLOAD_URL_EXPIRES, DocumentService
from hankosign.modules.documents.services.document_state_service import DocumentStateService
from hankosign.modules.users.models.user import User
from hankosign.services.storage_client import StorageClient, get_storage

router = APIRouter(prefix="/documents", tags=["documents"])

@router.post("", response_model=DocumentCreatedResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    template_type: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(require_capability(Capability.UPLOAD_DOCS))
):
    if file is None or not file.filename:
        raise HTTPException(400, "Please select a file")
    contents = await file.read()
    try:
        document = DocumentService.upload_document(
            db, storage, current_user.id,
            title=title,
            description=description,
            template_type=template_type,
            file_contents=contents,
            filename=file.filename,
            content_type=file.content_type or "application/octet-stream",
        )
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return DocumentCreatedResponse(document=document)

@router.get("", response_model=DocumentListResponse)
def list_documents(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Caller's documents with their signatures, newest first"""
    return DocumentListResponse(documents=DocumentService.get_documents_by_user(db, current_user.id))

@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        return DocumentService.get_owned_document(db, current_user.id, document_id)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)

@router.delete("", response_model=MessageResponse)
def delete_document(
    id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    if id is None:
        raise HTTPException(400, "Document ID is required")
    try:
        DocumentService.delete_document(db, storage, current_user.id, id)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return MessageResponse(message="Document deleted successfully")

@router.patch("/{document_id}/status", response_model=DocumentResponse)
def change_document_status(
    document_id: int,
    payload: StatusChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        return DocumentStateService.change_document_state(db, current_user.id, document_id, payload.status)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)

@router.get("/{document_id}/download", response_model=DownloadUrlResponse)
def get_download_url(
    document_id: int,
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """Presigned link to the stored file"""
    try:
        url = DocumentService.get_download_url(db, storage, current_user.id, document_id)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return DownloadUrlResponse(url=url, expires_in=DOWNLOAD_URL_EXPIRES)
