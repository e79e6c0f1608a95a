from __future__ import annotations

from typing import Literal

from app.core.security import BCRYPT_MAX_PASSWORD_BYTES
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Role = Literal["user", "admin"]


def _fits_bcrypt_limit(v: str) -> str:
    if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError("Password must be 72 bytes or fewer when UTF-8 encoded.")
    return v


class RegisterIn(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=6)
    role: Role = "user"

    @field_validator("password")
    @classmethod
    def password_must_fit_bcrypt_limit(cls, v: str) -> str:
        return _fits_bcrypt_limit(v)


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class PasswordUpdateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    current_password: str = Field(alias="currentPassword")
    new_password: str = Field(alias="newPassword", min_length=6)

    @field_validator("new_password")
    @classmethod
    def password_must_fit_bcrypt_limit(cls, v: str) -> str:
        return _fits_bcrypt_limit(v)
