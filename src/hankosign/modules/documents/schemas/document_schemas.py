from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from hankosign.modules.documents.models.document import DocumentStatus
from hankosign.modules.hankos.models.hanko import HankoType

class SignerSummary(BaseModel):
    name: str
    email: str

    model_config = {"from_attributes": True}

class HankoSummary(BaseModel):
    id: int
    name: str
    type: HankoType
    image_url: str

    model_config = {"from_attributes": True}

class SignatureResponse(BaseModel):
    id: int
    document_id: int
    hanko_id: int
    user_id: int
    page: int
    position_x: float
    position_y: float
    timestamp: datetime
    ip_address: str
    user_agent: str
    is_valid: bool
    hanko: HankoSummary
    user: SignerSummary

    model_config = {"from_attributes": True}

class DocumentResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    file_name: str
    file_size: int
    mime_type: str
    file_url: str
    page_count: Optional[int] = None
    status: DocumentStatus
    verification_code: str
    template_type: Optional[str] = None
    created_by_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    signatures: List[SignatureResponse] = []

    model_config = {"from_attributes": True}

class DocumentCreatedResponse(BaseModel):
    document: DocumentResponse

class DocumentListResponse(BaseModel):
    documents: List[DocumentResponse]

class StatusChangeRequest(BaseModel):
    status: DocumentStatus

class SignatureCreate(BaseModel):
    document_id: int
    hanko_id: int
    position_x: float = Field(ge=0)
    position_y: float = Field(ge=0)
    page: int = Field(1, ge=1)

class SignatureCreatedResponse(BaseModel):
    signature: SignatureResponse

# Public verification view: no file locations, IPs, user agents or emails

class VerifiedCreator(BaseModel):
    name: str
    company_name: Optional[str] = None

class VerifiedSigner(BaseModel):
    name: str
    position: Optional[str] = None

class VerifiedHanko(BaseModel):
    name: str
    type: HankoType

class VerifiedSignature(BaseModel):
    id: int
    timestamp: datetime
    is_valid: bool
    user: VerifiedSigner
    hanko: VerifiedHanko

class VerifiedDocument(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    file_name: str
    status: DocumentStatus
    verification_code: str
    created_at: datetime
    completed_at: Optional[datetime] = None
    created_by: VerifiedCreator
    signatures: List[VerifiedSignature]

class VerificationResponse(BaseModel):
    document: VerifiedDocument

class DownloadUrlResponse(BaseModel):
    url: str
    expires_in: int
