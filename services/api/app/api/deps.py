from __future__ import annotations

from functools import lru_cache

from app.core.config import settings
from app.core.errors import AuthenticationError, AuthorizationError, ValidationError
from app.crud.books import BookStore
from app.crud.notes import NoteStore
from app.crud.users import UserStore
from app.db.session import get_db
from app.models.user import User
from app.storage.blob_store import BlobStore, LocalBlobStore
from fastapi import Depends, Header
from sqlalchemy.orm import Session


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_book_store(db: Session = Depends(get_db)) -> BookStore:
    return BookStore(db)


def get_note_store(db: Session = Depends(get_db)) -> NoteStore:
    return NoteStore(db)


@lru_cache
def _default_blob_store() -> LocalBlobStore:
    return LocalBlobStore(settings.blob_root)


def get_blob_store() -> BlobStore:
    return _default_blob_store()


def resolve_admin(users: UserStore, raw_user_id: str | int | None) -> User:
    """Ad-hoc role check: the acting user must exist and hold the admin role."""
    if raw_user_id is None or str(raw_user_id).strip() == "":
        raise AuthenticationError("Not authenticated")
    try:
        user_id = int(str(raw_user_id).strip())
    except ValueError:
        raise ValidationError("Malformed user id")

    user = users.get_by_id(user_id)
    if user is None:
        raise AuthenticationError("Unknown user")
    if not user.is_admin:
        raise AuthorizationError("Admin role required")
    return user


def require_admin(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    users: UserStore = Depends(get_user_store),
) -> User:
    return resolve_admin(users, x_user_id)
