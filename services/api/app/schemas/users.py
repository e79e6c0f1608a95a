from __future__ import annotations

from datetime import datetime

from app.schemas.auth import Role
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    email: EmailStr
    name: str
    password_hash: str
    role: Role = "user"


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    role: Role | None = None

    @field_validator("name", "role")
    @classmethod
    def required_fields_cannot_be_cleared(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("field cannot be null")
        return v


class UserOut(BaseModel):
    """Public view of a user; the password hash never leaves the service."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    name: str
    role: Role
    created_at: datetime
    updated_at: datetime
