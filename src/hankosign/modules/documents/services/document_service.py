import io
import logging
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from PyPDF2 import PdfReader
from sqlalchemy.orm import Session, selectinload

from hankosign.errors import NotFoundError, ValidationError
from hankosign.modules.documents.models.document import Document, DocumentStatus
from hankosign.modules.documents.models.signature import Signature
from hankosign.modules.documents.services.verification_code import generate_unique_verification_code
from hankosign.services.storage_client import StorageClient, generate_file_key

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 20 * 1024 * 1024  # 20 MB
MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
DOWNLOAD_URL_EXPIRES = 3600  # seconds

PDF_MIME_TYPE = "application/pdf"
ALLOWED_MIME_TYPES = frozenset({
    PDF_MIME_TYPE,
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
})

class DocumentService:

    @staticmethod
    def get_documents_by_user(session: Session, user_id: int) -> List[Document]:
        """All documents uploaded by a user, newest first"""
        return (
            session.query(Document)
            .options(selectinload(Document.signatures).selectinload(Signature.hanko),
                     selectinload(Document.signatures).selectinload(Signature.user))
            .filter(Document.created_by_id == user_id)
            .order_by(Document.created_at.desc(), Document.id.desc())
            .all()
        )

    @staticmethod
    def get_owned_document(session: Session, user_id: int, document_id: int) -> Document:
        """A document of the caller; someone else's document is reported as missing"""
        document = (
            session.query(Document)
            .filter(Document.id == document_id, Document.created_by_id == user_id)
            .first()
        )
        if not document:
            raise NotFoundError("Document not found")
        return document

    @staticmethod
    def upload_document(
        session: Session,
        storage: StorageClient,
        user_id: int,
        title: Optional[str],
        description: Optional[str],
        template_type: Optional[str],
        file_contents: bytes,
        filename: str,
        content_type: str,
    ) -> Document:
        """
        Validate and store an uploaded document:
        - validate metadata and file
        - upload the file to object storage
        - create the DRAFT record with a fresh verification code
        """
        # 1) Validations
        DocumentService._validate_metadata(title, description)
        page_count = DocumentService._validate_file(file_contents, content_type)

        # 2) Object storage
        file_key = generate_file_key(user_id, filename)
        file_url = storage.upload_file(file_key, file_contents, content_type)

        # 3) Database record
        document = Document(
            title=title,
            description=description or None,
            template_type=template_type or None,
            file_name=filename,
            file_size=len(file_contents),
            mime_type=content_type,
            file_key=file_key,
            file_url=file_url,
            page_count=page_count,
            status=DocumentStatus.DRAFT,
            verification_code=generate_unique_verification_code(session),
            created_by_id=user_id,
        )
        session.add(document)
        session.commit()
        session.refresh(document)

        logger.info(f"User {user_id} uploaded document {document.id} ({len(file_contents)} bytes)")
        return document

    @staticmethod
    def _validate_metadata(title: Optional[str], description: Optional[str]):
        if not title or not title.strip() or len(title) > MAX_TITLE_LENGTH:
            raise ValidationError("Please enter a title (200 characters or less)")
        if description and len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError("Description must be 2000 characters or less")

    @staticmethod
    def _validate_file(file_contents: bytes, content_type: str) -> Optional[int]:
        """Validate the upload; returns the page count for PDFs"""
        if len(file_contents) > MAX_FILE_SIZE:
            raise ValidationError("File size must be 20MB or less")

        if content_type not in ALLOWED_MIME_TYPES:
            raise ValidationError("File format not permitted")

        if not file_contents:
            raise ValidationError("The file is empty")

        if content_type != PDF_MIME_TYPE:
            return None

        try:
            reader = PdfReader(io.BytesIO(file_contents))
            return len(reader.pages)
        except Exception:
            raise ValidationError("Invalid or damaged PDF")

    @staticmethod
    def get_download_url(session: Session, storage: StorageClient, user_id: int, document_id: int,
                         expires_in: int = DOWNLOAD_URL_EXPIRES) -> str:
        """Short-lived link to the stored file of an owned document"""
        document = DocumentService.get_owned_document(session, user_id, document_id)
        return storage.get_presigned_url(document.file_key, expires_in)

    @staticmethod
    def delete_document(session: Session, storage: StorageClient, user_id: int, document_id: int) -> None:
        """
        Delete an owned document with its signatures and workflow.

        The stored file is removed best-effort after the commit.
        """
        document = DocumentService.get_owned_document(session, user_id, document_id)
        file_key = document.file_key
        session.delete(document)
        session.commit()
        logger.info(f"User {user_id} deleted document {document_id}")

        try:
            storage.delete_file(file_key)
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"Could not delete stored file {file_key}: {e}")
