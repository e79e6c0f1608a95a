from __future__ import annotations

from app.api.deps import get_user_store, require_admin
from app.core.errors import NotFoundError
from app.crud.users import UserStore
from app.schemas.users import UserOut, UserUpdate
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
def list_users(users: UserStore = Depends(get_user_store)):
    return users.get_all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, users: UserStore = Depends(get_user_store)):
    u = users.get_by_id(user_id)
    if u is None:
        raise NotFoundError("User", user_id)
    return u


@router.patch("/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def update_user(user_id: int, payload: UserUpdate, users: UserStore = Depends(get_user_store)):
    u = users.update(user_id, payload)
    if u is None:
        raise NotFoundError("User", user_id)
    return u


@router.delete(
    "/{user_id}",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_admin)],
)
def delete_user(user_id: int, users: UserStore = Depends(get_user_store)):
    if not users.delete(user_id):
        raise NotFoundError("User", user_id)
    return "User deleted"
