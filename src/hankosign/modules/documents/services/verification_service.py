from sqlalchemy.orm import Session, joinedload, selectinload

from hankosign.errors import NotFoundError
from hankosign.modules.documents.models.document import Document
from hankosign.modules.documents.models.signature import Signature
from hankosign.modules.documents.schemas.document_schemas import (
    VerificationResponse, VerifiedCreator, VerifiedDocument, VerifiedHanko,
    VerifiedSignature, VerifiedSigner
)
from hankosign.modules.documents.services.verification_code import normalize_code

class VerificationService:

    @staticmethod
    def verify(session: Session, code: str) -> VerificationResponse:
        """Public view of a document by its verification code"""
        document = (
            session.query(Document)
            .options(
                joinedload(Document.created_by),
                selectinload(Document.signatures).joinedload(Signature.user),
                selectinload(Document.signatures).joinedload(Signature.hanko),
            )
            .filter(Document.verification_code == normalize_code(code))
            .first()
        )
        if not document:
            raise NotFoundError("Document not found")

        signatures = sorted(document.signatures, key=lambda s: (s.timestamp, s.id))
        return VerificationResponse(
            document=VerifiedDocument(
                id=document.id,
                title=document.title,
                description=document.description,
                file_name=document.file_name,
                status=document.status,
                verification_code=document.verification_code,
                created_at=document.created_at,
                completed_at=document.completed_at,
                created_by=VerifiedCreator(
                    name=document.created_by.name,
                    company_name=document.created_by.company_name,
                ),
                signatures=[
                    VerifiedSignature(
                        id=sig.id,
                        timestamp=sig.timestamp,
                        is_valid=sig.is_valid,
                        user=VerifiedSigner(name=sig.user.name, position=sig.user.position),
                        hanko=VerifiedHanko(name=sig.hanko.name, type=sig.hanko.type),
                    )
                    for sig in signatures
                ],
            )
        )
