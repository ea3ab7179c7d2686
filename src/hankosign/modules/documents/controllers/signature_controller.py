from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from hankosign.database import get_db
from hankosign.errors import HankoSignError
from hankosign.modules.auth.dependencies import require_capability
from hankosign.modules.auth.services.permission import Capability
from hankosign.modules.documents.schemas.document_schemas import SignatureCreate, SignatureCreatedResponse
from hankosign.modules.documents.services.signature_service import SignatureService, resolve_client_ip
from hankosign.modules.users.models.user import User

router = APIRouter(prefix="/signatures", tags=["signatures"])

@router.post("", response_model=SignatureCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_signature(
    payload: SignatureCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.SIGN_DOCS))
):
    """
    Apply one of the caller's hankos to a document.
    """
    ip_address = resolve_client_ip(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
    )
    try:
        signature = SignatureService.sign_document(
            db, current_user, payload, ip_address, request.headers.get("user-agent")
        )
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return SignatureCreatedResponse(signature=signature)
