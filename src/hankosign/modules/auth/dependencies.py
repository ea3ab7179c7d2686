from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from hankosign.config import get_settings
from hankosign.database import get_db
from hankosign.modules.auth.services.auth_service import AuthService
from hankosign.modules.auth.services.permission import Capability, has_capability
from hankosign.modules.users.models.user import User

security = HTTPBearer(auto_error=False)

def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the authenticated user from the session cookie or a bearer token"""
    token = request.cookies.get(get_settings().SESSION_COOKIE_NAME)
    if credentials is not None:
        token = credentials.credentials
    user = AuthService.get_current_user(db, token) if token else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

def require_capability(capability: Capability):
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not has_capability(current_user.role, capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return current_user
    return dependency
