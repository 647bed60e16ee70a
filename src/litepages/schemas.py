"""Pydantic schemas for the lite management API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

ACCENT_PATTERN = r"^#[0-9a-fA-F]{3}([0-9a-fA-F]{3})?$"


class LiteCreate(BaseModel):
    """Body of ``POST /api/lites``."""
    property_id: int = Field(..., gt=0)
    slug: str = Field(..., min_length=1, max_length=100)
    room_id: Optional[int] = Field(default=None, gt=0, description="Pin the page to one bookable unit")
    account_id: Optional[int] = Field(default=None, gt=0)
    custom_title: Optional[str] = Field(default=None, max_length=255)
    custom_tagline: Optional[str] = Field(default=None, max_length=500)
    theme: Optional[str] = Field(default=None, max_length=50)
    accent_color: Optional[str] = Field(default=None, pattern=ACCENT_PATTERN)


class LiteUpdate(BaseModel):
    """Body of ``PUT /api/lites/{id}``. Only the fields sent are applied."""
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100)
    custom_title: Optional[str] = Field(default=None, max_length=255)
    custom_tagline: Optional[str] = Field(default=None, max_length=500)
    theme: Optional[str] = Field(default=None, max_length=50)
    accent_color: Optional[str] = Field(default=None, pattern=ACCENT_PATTERN)
    active: Optional[bool] = None
    show_pricing: Optional[bool] = None
    show_availability: Optional[bool] = None
    show_reviews: Optional[bool] = None
    show_qr: Optional[bool] = None
