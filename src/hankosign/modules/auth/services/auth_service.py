import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from hankosign.config import get_settings
from hankosign.modules.users.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

class AuthService:

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Check a plain password against its hash"""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password"""
        return pwd_context.hash(password)

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """
        Authenticate by email and password.

        Unknown email, wrong password and inactive account all return None so
        callers cannot tell them apart.
        """
        user = db.query(User).filter(User.email == email).first()
        if not user:
            return None
        if not AuthService.verify_password(password, user.password_hash):
            return None
        if not user.is_active:
            return None
        return user

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
        """Create a signed JWT"""
        settings = get_settings()
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> Optional[int]:
        """Verify a JWT and return the user id it was issued for"""
        settings = get_settings()
        try:
            payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        except JWTError:
            return None
        subject = payload.get("sub")
        if subject is None:
            return None
        try:
            return int(subject)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def get_current_user(db: Session, token: str) -> Optional[User]:
        """Resolve the user behind a token"""
        user_id = AuthService.verify_token(token)
        if user_id is None:
            return None
        user = db.get(User, user_id)
        if user is None or not user.is_active:
            return None
        return user

    @staticmethod
    def hash_reset_token(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @staticmethod
    def issue_reset_token(user: User) -> Tuple[str, datetime]:
        """
        Generate a password-reset token for ``user``.

        Only the SHA-256 of the token is stored on the user; the raw token is
        returned for the reset link. The caller commits.
        """
        settings = get_settings()
        token = secrets.token_hex(32)
        expires = datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
        user.password_reset_token_hash = AuthService.hash_reset_token(token)
        user.password_reset_expires = expires
        return token, expires

    @staticmethod
    def find_user_by_reset_token(db: Session, token: str) -> Optional[User]:
        """Return the user owning an unexpired reset token"""
        token_hash = AuthService.hash_reset_token(token)
        user = db.query(User).filter(User.password_reset_token_hash == token_hash).first()
        if not user or user.password_reset_expires is None:
            return None
        if user.password_reset_expires < datetime.utcnow():
            return None
        return user
