from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prompts.festivals import Industry


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    brand_name: Optional[str] = None
    brand_description: Optional[str] = None
    brand_logo_url: Optional[str] = None
    industry_type: Optional[str] = None
    brand_style_context: Optional[str] = None
    subscription_plan: Optional[str] = None
    free_images_generated: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProfileUpsertRequest(BaseModel):
    """Fields to merge into the caller's profile; omitted fields are kept."""

    full_name: Optional[str] = None
    brand_name: Optional[str] = None
    brand_description: Optional[str] = None
    brand_logo_url: Optional[str] = None
    industry_type: Optional[str] = None
    brand_style_context: Optional[str] = None


class OnboardingRequest(BaseModel):
    industry_type: str = Field(..., min_length=1)
    brand_logo_url: Optional[str] = None
    brand_style_context: Optional[str] = None
    brand_name: Optional[str] = None

    @field_validator("industry_type")
    @classmethod
    def industry_must_be_known(cls, value: str) -> str:
        industry = Industry.resolve(value)
        if industry is None:
            allowed = ", ".join(member.label for member in Industry)
            raise ValueError(f"Unknown industry '{value}'. Choose one of: {allowed}")
        return industry.label

    @field_validator("brand_style_context")
    @classmethod
    def style_must_not_be_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Brand style context cannot be empty")
        return value


class ReadinessResponse(BaseModel):
    ready: bool
    needs_onboarding: bool


class LogoUploadResponse(BaseModel):
    brand_logo_url: str
    size: int
    content_type: str


class BrandStyleRequest(BaseModel):
    industry_type: Optional[str] = None
    brand_name: Optional[str] = None


class BrandStyleResponse(BaseModel):
    brand_style_context: str
