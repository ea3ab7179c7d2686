from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from hankosign.modules.auth.schemas.auth_schemas import check_password_policy
from hankosign.modules.users.models.user import UserRole

class UserProfile(BaseModel):
    id: int
    email: str
    name: str
    name_kana: Optional[str] = None
    role: UserRole
    company_name: Optional[str] = None
    corporate_number: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = {"from_attributes": True}

class UserProfileResponse(BaseModel):
    user: UserProfile

class ProfileUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    name_kana: Optional[str] = Field(None, max_length=100)
    email: EmailStr
    department: Optional[str] = Field(None, max_length=100)
    position: Optional[str] = Field(None, max_length=100)

class CompanyUpdate(BaseModel):
    company_name: Optional[str] = Field(None, max_length=200)
    corporate_number: Optional[str] = Field(None, max_length=13)

class PasswordChange(BaseModel):
    current_password: str = Field(min_length=8)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_policy(cls, value: str) -> str:
        return check_password_policy(value)

class PreferencesUpdate(BaseModel):
    language: Optional[Literal["ja", "en"]] = None
    timezone: Optional[str] = Field(None, max_length=50)
    date_format: Optional[str] = Field(None, max_length=20)
    email_notifications: Optional[bool] = None
    approval_notifications: Optional[bool] = None
    signature_notifications: Optional[bool] = None
    reminder_notifications: Optional[bool] = None

class PreferencesResponse(BaseModel):
    message: str
    preferences: Dict[str, Any]

class RoleChangeRequest(BaseModel):
    # Kept as a plain string so an unknown role is reported by the handler
    role: str

class RoleChangedUser(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole

    model_config = {"from_attributes": True}

class RoleChangeResponse(BaseModel):
    user: RoleChangedUser

class UserListResponse(BaseModel):
    users: List[UserProfile]
    total: int
