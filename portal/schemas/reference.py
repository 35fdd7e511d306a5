"""Pydantic schemas for admin-owned reference data: upazilas, sliders, site settings"""
from datetime import datetime
from typing import Optional

from pydantic import Field, validator

from portal.schemas.common import CamelModel


class UpazilaCreate(CamelModel):
    """Request model for creating an upazila"""
    name: str = Field(..., min_length=1, max_length=120)
    name_bn: Optional[str] = None
    slug: Optional[str] = Field(None, max_length=120, description="Derived from name when omitted")
    description: Optional[str] = None
    description_bn: Optional[str] = None
    is_active: bool = True
    display_order: int = 0

    @validator("slug")
    def validate_slug(cls, v: Optional[str]) -> Optional[str]:
        """Validate slug format"""
        if v is None:
            return v
        v = v.strip().lower()
        if not v.replace('-', '').replace('_', '').isalnum():
            raise ValueError('Slug must contain only alphanumeric characters, hyphens, and underscores')
        return v


class UpazilaUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    name_bn: Optional[str] = None
    description: Optional[str] = None
    description_bn: Optional[str] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class UpazilaResponse(CamelModel):
    id: int
    name: str
    name_bn: Optional[str] = None
    slug: str
    description: Optional[str] = None
    description_bn: Optional[str] = None
    is_active: bool
    display_order: int


class SliderCreate(CamelModel):
    """Request model for a homepage slide; the image is a pasted URL"""
    title: str = Field(..., min_length=1, max_length=255)
    title_bn: Optional[str] = None
    description: Optional[str] = None
    description_bn: Optional[str] = None
    image_url: str = Field(..., min_length=1, max_length=1000)
    link_url: Optional[str] = None
    button_text: Optional[str] = None
    is_active: bool = True
    display_order: int = 0


class SliderUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    title_bn: Optional[str] = None
    description: Optional[str] = None
    description_bn: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1, max_length=1000)
    link_url: Optional[str] = None
    button_text: Optional[str] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class SliderResponse(CamelModel):
    id: int
    title: str
    title_bn: Optional[str] = None
    description: Optional[str] = None
    description_bn: Optional[str] = None
    image_url: str
    link_url: Optional[str] = None
    button_text: Optional[str] = None
    is_active: bool
    display_order: int
    created_at: Optional[datetime] = None


class SettingUpdate(CamelModel):
    value: Optional[str] = None
    description: Optional[str] = None


class SettingResponse(CamelModel):
    key: str
    value: Optional[str] = None
    description: Optional[str] = None
    updated_at: Optional[datetime] = None

