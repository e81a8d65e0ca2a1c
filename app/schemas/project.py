from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    title_en: str | None = Field(default=None, max_length=200)
    description: str = Field(min_length=1)
    description_en: str | None = None
    category: str = Field(min_length=1, max_length=80)
    image_url: str = Field(min_length=1, max_length=1000)
    featured: bool = False
    display_order: int = 0

    model_config = ConfigDict(str_strip_whitespace=True)


class ProjectUpdateRequest(BaseModel):
    """Partial update; omitted fields are left as they are."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    title_en: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    description_en: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=80)
    image_url: str | None = Field(default=None, min_length=1, max_length=1000)
    featured: bool | None = None
    display_order: int | None = None

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator(
        "title", "description", "category", "image_url", "featured", "display_order"
    )
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ProjectResponse(BaseModel):
    id: int
    title: str
    title_en: str | None
    description: str
    description_en: str | None
    category: str
    image_url: str
    featured: bool
    display_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
