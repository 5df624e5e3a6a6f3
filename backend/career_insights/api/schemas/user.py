"""
Pydantic schemas for the user profile API.

Request and response models for profile and onboarding endpoints.
"""

from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileUpdateRequest(BaseModel):
    """Request body for updating the signed-in user's profile."""

    industry: str = Field(..., min_length=1, max_length=255, description="Industry name, e.g. tech-software-development")
    experience: Optional[int] = Field(None, ge=0, le=80, description="Years of experience")
    bio: Optional[str] = Field(None, max_length=5000, description="Short professional bio")
    skills: List[str] = Field(default_factory=list, description="Skill names")

    @field_validator("industry")
    @classmethod
    def _validate_industry(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("industry must not be blank")
        return cleaned


class UserResponse(BaseModel):
    """Response model for a user record."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Internal user identifier")
    clerk_user_id: str = Field(..., description="Authentication provider user identifier")
    email: str
    name: Optional[str] = None
    image_url: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[int] = None
    bio: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class OnboardingStatusResponse(BaseModel):
    """Response model for onboarding status."""

    is_onboarded: bool = Field(..., description="Whether the user has chosen an industry")
