"""
Pydantic schemas for the pre-launch waitlist.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid


class WaitlistJoinRequest(BaseModel):
    email: EmailStr = Field(..., examples=["early@example.com"])
    name: str = Field("", max_length=255, examples=["Ada"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return v.strip()


class WaitlistEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    created_at: datetime


class WaitlistJoinResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[WaitlistEntryResponse] = None


class WaitlistListResponse(BaseModel):
    data: List[WaitlistEntryResponse]
