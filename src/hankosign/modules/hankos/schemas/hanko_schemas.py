from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from hankosign.modules.hankos.models.hanko import HankoType

# ~375KB decoded, generous for a hanko PNG
MAX_IMAGE_DATA_LENGTH = 500_000

class HankoCreate(BaseModel):
    name: str
    type: HankoType
    image_data: str
    font: Optional[str] = Field(None, max_length=100)
    size: int = Field(60, ge=20, le=500)
    registration_number: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Please enter a hanko name")
        if len(value) > 50:
            raise ValueError("Hanko name must be 50 characters or less")
        return value

    @field_validator("image_data")
    @classmethod
    def image_size(cls, value: str) -> str:
        if not value:
            raise ValueError("Image data is required")
        if len(value) > MAX_IMAGE_DATA_LENGTH:
            raise ValueError("Image data is too large")
        return value

    @model_validator(mode="after")
    def registration_only_for_jitsuin(self):
        if self.registration_number and self.type != HankoType.JITSUIN:
            raise ValueError("Only a jitsuin can carry a registration number")
        return self

class HankoResponse(BaseModel):
    id: int
    user_id: int
    name: str
    type: HankoType
    image_url: str
    image_data: str
    font: Optional[str] = None
    size: int
    is_registered: bool
    registration_number: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}

class HankoCreatedResponse(BaseModel):
    hanko: HankoResponse

class HankoListResponse(BaseModel):
    hankos: List[HankoResponse]
