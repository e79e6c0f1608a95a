from __future__ import annotations

from datetime import datetime
from typing import Sequence

from app.crud.base import RecordStore
from app.models.note import Note
from app.schemas.notes import NoteCreate, NoteUpdate
from sqlalchemy import select


class NoteStore(RecordStore[Note]):
    model = Note

    def create(self, data: NoteCreate) -> Note:  # type: ignore[override]
        return super().create(data)

    def update(self, record_id: int, patch: NoteUpdate) -> Note | None:  # type: ignore[override]
        return super().update(record_id, patch)

    def get_by_book_id(self, book_id: int) -> Sequence[Note]:
        return self._list(Note.book_id == book_id)

    def get_by_user_id(self, user_id: int) -> Sequence[Note]:
        return self._list(Note.user_id == user_id)

    def author_ids_since(self, moment: datetime) -> set[int]:
        stmt = (
            select(Note.user_id)
            .where(Note.created_at >= moment)
            .where(Note.user_id.is_not(None))
            .distinct()
        )
        return {int(uid) for uid in self.db.execute(stmt).scalars().all()}
