from __future__ import annotations

from datetime import datetime
from typing import Sequence

from app.crud.base import RecordStore
from app.models.book import Book
from app.models.note import Note
from app.schemas.books import BookCreate, BookUpdate
from sqlalchemy import func, select


class BookStore(RecordStore[Book]):
    model = Book

    def create(self, data: BookCreate) -> Book:  # type: ignore[override]
        return super().create(data)

    def update(self, record_id: int, patch: BookUpdate) -> Book | None:  # type: ignore[override]
        return super().update(record_id, patch)

    def most_annotated(self, limit: int = 5) -> Sequence[tuple[Book, int]]:
        """Books ranked by how many notes reference them, newest first on ties."""
        note_count = func.count(Note.id).label("note_count")
        stmt = (
            select(Book, note_count)
            .outerjoin(Note, Note.book_id == Book.id)
            .group_by(Book.id)
            .order_by(note_count.desc(), Book.created_at.desc(), Book.id.desc())
            .limit(limit)
        )
        return [(book, int(n)) for book, n in self.db.execute(stmt).tuples().all()]

    def uploader_ids_since(self, moment: datetime) -> set[int]:
        stmt = (
            select(Book.uploaded_by)
            .where(Book.created_at >= moment)
            .where(Book.uploaded_by.is_not(None))
            .distinct()
        )
        return {int(uid) for uid in self.db.execute(stmt).scalars().all()}
