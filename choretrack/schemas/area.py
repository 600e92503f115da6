"""Pydantic schemas for Area model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from choretrack.models.area import DEFAULT_AREA_COLOR

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class AreaBase(BaseModel):
    """Base schema for Area."""

    name: str = Field(..., min_length=1, max_length=50, description="Area name")
    color: str = Field(DEFAULT_AREA_COLOR, pattern=COLOR_PATTERN, description="Hex color, #RRGGBB")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class AreaCreate(AreaBase):
    """Schema for creating a new area."""

    pass


class AreaUpdate(BaseModel):
    """Schema for updating an area."""

    name: str | None = Field(None, min_length=1, max_length=50)
    color: str | None = Field(None, pattern=COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Validate name is not empty if provided."""
        if v is not None and len(v.strip()) == 0:
            raise ValueError("Name cannot be empty")
        return v.strip() if v is not None else v


class AreaSummary(BaseModel):
    """Area as embedded in task and dashboard responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str | None


class AreaResponse(AreaBase):
    """Schema for area response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
