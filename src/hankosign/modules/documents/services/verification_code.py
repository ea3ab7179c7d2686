import re
import secrets
from sqlalchemy.orm import Session

from hankosign.modules.documents.models.document import Document

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
CODE_LENGTH = 12
GROUP_SIZE = 4
MAX_ATTEMPTS = 10

CODE_PATTERN = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")

def generate_verification_code() -> str:
    """Random ``XXXX-XXXX-XXXX`` code drawn with a CSPRNG"""
    raw = "".join(secrets.choice(ALPHABET) for _ in range(CODE_LENGTH))
    return "-".join(raw[i:i + GROUP_SIZE] for i in range(0, CODE_LENGTH, GROUP_SIZE))

def generate_unique_verification_code(session: Session) -> str:
    """Generate codes until one is not used by any document"""
    for _ in range(MAX_ATTEMPTS):
        code = generate_verification_code()
        exists = session.query(Document.id).filter(Document.verification_code == code).first()
        if not exists:
            return code
    raise RuntimeError("Could not generate a unique verification code")

def normalize_code(code: str) -> str:
    return code.strip().upper()
