"""Child profile models used to personalise stories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from ..utils.validators import ensure_not_blank
from .base import CamelModel

MIN_CHILD_AGE = 3
MAX_CHILD_AGE = 12


class UserProfileCreate(CamelModel):
    """Profile fields supplied by the caregiver."""

    name: str = Field(..., min_length=1, max_length=80)
    gender: str = Field(..., min_length=1)
    age: int = Field(..., ge=MIN_CHILD_AGE, le=MAX_CHILD_AGE)
    hair_color: str = Field(..., min_length=1)
    hair_type: str = Field(..., min_length=1)
    skin_tone: str = Field(..., min_length=1)
    thumbnail: Optional[str] = None

    @field_validator("name", "gender", "hair_color", "hair_type", "skin_tone")
    @classmethod
    def validate_not_blank(cls, value: str, info: ValidationInfo) -> str:
        return ensure_not_blank(value, field_name=info.field_name)


class UserProfile(UserProfileCreate):
    """Stored child profile."""

    id: int
    creation_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
