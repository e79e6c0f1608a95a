from __future__ import annotations

from app.crud.base import RecordStore
from app.models.user import User
from app.schemas.users import UserCreate, UserUpdate
from sqlalchemy import select


class UserStore(RecordStore[User]):
    model = User

    def create(self, data: UserCreate) -> User:  # type: ignore[override]
        return super().create(data)

    def update(self, record_id: int, patch: UserUpdate) -> User | None:  # type: ignore[override]
        return super().update(record_id, patch)

    def get_by_email(self, email: str) -> User | None:
        return self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def set_password_hash(self, user: User, password_hash: str) -> User:
        user.password_hash = password_hash
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
