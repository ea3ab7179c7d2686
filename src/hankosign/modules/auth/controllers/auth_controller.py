import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from hankosign.config import get_settings
from hankosign.database import get_db
from hankosign.modules.audit.services.audit_service import AuditAction, AuditService
from hankosign.modules.auth.dependencies import get_current_user
from hankosign.modules.auth.services.auth_service import AuthService
from hankosign.modules.auth.schemas.auth_schemas import (
    LoginRequest, TokenResponse, RegisterRequest, RegisterResponse,
    ForgotPasswordRequest, ResetPasswordRequest, MessageResponse
)
from hankosign.modules.users.models.user import User, UserRole
from hankosign.modules.users.schemas.user_schemas import UserProfileResponse
from hankosign.services.email_sender import EmailSender, get_email_sender
from hankosign.services.email_templates import password_reset_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

FORGOT_PASSWORD_MESSAGE = "If an account exists with this email, a reset link has been sent."
EMAIL_TAKEN_MESSAGE = "This email address is already registered"

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_user(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Self-service account registration"""
    if db.query(User).filter(User.email == user_data.email).first():
        raise HTTPException(status.HTTP_400_BAD_REQUEST, EMAIL_TAKEN_MESSAGE)

    new_user = User(
        email=user_data.email,
        password_hash=AuthService.get_password_hash(user_data.password),
        name=user_data.name,
        name_kana=user_data.name_kana,
        company_name=user_data.company_name,
        department=user_data.department,
        position=user_data.position,
        role=UserRole.USER,
        is_active=True
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise HTTPException(status.HTTP_400_BAD_REQUEST, EMAIL_TAKEN_MESSAGE)
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.id}")
    return RegisterResponse(message="Registration completed successfully", user=new_user)

@router.post("/login", response_model=TokenResponse)
def login(login_data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Exchange credentials for a session token"""
    user = AuthService.authenticate_user(db, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    settings = get_settings()
    access_token = AuthService.create_access_token(data={"sub": str(user.id)})
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user_id=user.id,
        user_name=user.name,
        user_role=user.role.value
    )

@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(get_settings().SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out")

@router.get("/me", response_model=UserProfileResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Profile of the authenticated user"""
    return UserProfileResponse(user=current_user)

@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender)
):
    """
    Email a password-reset link.

    The response is identical whether or not the account exists.
    """
    user = db.query(User).filter(User.email == payload.email).first()
    if not user:
        return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)

    token, expires = AuthService.issue_reset_token(user)
    AuditService(db).record(
        AuditAction.PASSWORD_RESET_REQUESTED,
        entity_type="User",
        entity_id=user.id,
        user_id=user.id,
        details={"expires_at": expires.isoformat()}
    )
    db.commit()

    reset_url = f"{get_settings().APP_BASE_URL}/reset-password?token={token}"
    await email_sender.send(
        to=user.email,
        subject="HankoSign Digital - パスワードリセット",
        html=password_reset_email(user.name, reset_url)
    )
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)

@router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Redeem a reset token and set a new password"""
    user = AuthService.find_user_by_reset_token(db, payload.token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token"
        )

    user.password_hash = AuthService.get_password_hash(payload.new_password)
    user.password_reset_token_hash = None
    user.password_reset_expires = None
    AuditService(db).record(
        AuditAction.PASSWORD_RESET_COMPLETED,
        entity_type="User",
        entity_id=user.id,
        user_id=user.id
    )
    db.commit()
    return MessageResponse(message="Password has been reset")
