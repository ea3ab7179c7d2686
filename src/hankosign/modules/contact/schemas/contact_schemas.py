from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

class ContactRequest(BaseModel):
    name: str = Field(max_length=100)
    email: EmailStr
    company: Optional[str] = Field(None, max_length=100)
    subject: str = Field(max_length=200)
    message: str = Field(max_length=5000)

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter your name")
        return v

    @field_validator("subject")
    @classmethod
    def subject_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter a subject")
        return v

    @field_validator("message")
    @classmethod
    def message_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter a message")
        return v
