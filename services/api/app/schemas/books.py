from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    author: str = Field(min_length=1, max_length=300)
    description: str | None = None
    cover_url: str | None = None
    file_url: str = Field(min_length=1, max_length=1000)
    uploaded_by: int | None = None


class BookUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None
    cover_url: str | None = None

    # Omitted fields are left alone; null clears description and cover_url.
    @field_validator("title", "author")
    @classmethod
    def required_fields_cannot_be_cleared(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("field cannot be null")
        return v


class BookOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    description: str | None
    cover_url: str | None
    file_url: str
    uploaded_by: int | None
    created_at: datetime
