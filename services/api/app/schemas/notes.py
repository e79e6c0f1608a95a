from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NoteCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    content: str = ""
    book_id: int | None = None
    user_id: int | None = None


class NoteUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    content: str | None = None
    book_id: int | None = None

    # Null book_id detaches the note from its book.
    @field_validator("title", "content")
    @classmethod
    def required_fields_cannot_be_cleared(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("field cannot be null")
        return v


class NoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    book_id: int | None
    user_id: int | None
    created_at: datetime
    updated_at: datetime
