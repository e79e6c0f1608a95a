from __future__ import annotations

import logging

from app.api.deps import get_user_store
from app.core.errors import AuthenticationError, NotFoundError, StorageWriteError, ValidationError
from app.core.security import hash_password, password_needs_rehash, verify_password
from app.crud.users import UserStore
from app.schemas.auth import LoginIn, PasswordUpdateIn, RegisterIn
from app.schemas.users import UserCreate, UserOut
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=UserOut)
def register(payload: RegisterIn, users: UserStore = Depends(get_user_store)):
    if users.get_by_email(payload.email) is not None:
        raise ValidationError("Email already registered")

    try:
        u = users.create(
            UserCreate(
                email=payload.email,
                name=payload.name.strip(),
                password_hash=hash_password(payload.password),
                role=payload.role,
            )
        )
    except StorageWriteError as exc:
        # A concurrent registration can claim the email after the lookup above.
        if users.get_by_email(payload.email) is not None:
            raise ValidationError("Email already registered") from exc
        raise
    logger.info("user registered", extra={"user_id": u.id, "role": u.role})
    return u


@router.post("/login", response_model=UserOut)
def login(payload: LoginIn, users: UserStore = Depends(get_user_store)):
    u = users.get_by_email(payload.email)
    if u is None:
        raise NotFoundError("User")

    if not verify_password(payload.password, u.password_hash):
        raise AuthenticationError("Incorrect password")

    # Hashes made with an older cost factor are upgraded on the next good login.
    if password_needs_rehash(u.password_hash):
        users.set_password_hash(u, hash_password(payload.password))

    return u


@router.post("/update-password", response_class=PlainTextResponse)
def update_password(payload: PasswordUpdateIn, users: UserStore = Depends(get_user_store)):
    u = users.get_by_id(payload.user_id)
    if u is None:
        raise NotFoundError("User", payload.user_id)

    if not verify_password(payload.current_password, u.password_hash):
        raise AuthenticationError("Current password is incorrect")

    users.set_password_hash(u, hash_password(payload.new_password))
    logger.info("password updated", extra={"user_id": u.id})
    return "Password updated"
