from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from hankosign.database import get_db
from hankosign.errors import HankoSignError
from hankosign.modules.documents.schemas.document_schemas import VerificationResponse
from hankosign.modules.documents.services.verification_service import VerificationService

router = APIRouter(prefix="/verify", tags=["verify"])

@router.get("/{code}", response_model=VerificationResponse)
def verify_document(code: str, db: Session = Depends(get_db)):
    """Public lookup by verification code; no authentication"""
    try:
        return VerificationService.verify(db, code)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
