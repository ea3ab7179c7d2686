from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from hankosign.database import get_db
from hankosign.errors import HankoSignError
from hankosign.modules.auth.dependencies import get_current_user
from hankosign.modules.auth.schemas.auth_schemas import MessageResponse
from hankosign.modules.users.models.user import User
from hankosign.modules.users.services.user_service import UserService
from hankosign.modules.users.schemas.user_schemas import (
    UserProfileResponse, ProfileUpdate, CompanyUpdate,
    PasswordChange, PreferencesUpdate, PreferencesResponse
)

router = APIRouter(prefix="/user", tags=["account"])

@router.patch("/profile", response_model=UserProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        user = UserService.update_profile(db, current_user, payload.model_dump(exclude_unset=True))
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return UserProfileResponse(user=user)

@router.patch("/company", response_model=UserProfileResponse)
def update_company(
    payload: CompanyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user = UserService.update_company(db, current_user, payload.model_dump(exclude_unset=True))
    return UserProfileResponse(user=user)

@router.patch("/password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        UserService.change_password(db, current_user, payload.current_password, payload.new_password)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return MessageResponse(message="Password updated successfully")

@router.patch("/preferences", response_model=PreferencesResponse)
def update_preferences(
    payload: PreferencesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    preferences = UserService.update_preferences(db, current_user, payload.model_dump(exclude_unset=True))
    return PreferencesResponse(message="Preferences saved successfully", preferences=preferences)
