from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.crud.books import BookStore
from app.crud.notes import NoteStore
from app.crud.users import UserStore
from app.schemas.statistics import PopularBookOut, StatisticsOut

RECENT_WINDOW = timedelta(days=30)
POPULAR_BOOKS_LIMIT = 5


def compute_statistics(
    users: UserStore,
    books: BookStore,
    notes: NoteStore,
    *,
    now: datetime | None = None,
) -> StatisticsOut:
    now = now or datetime.now(timezone.utc)
    since = now - RECENT_WINDOW

    active = books.uploader_ids_since(since) | notes.author_ids_since(since)

    return StatisticsOut(
        total_users=users.count(),
        total_books=books.count(),
        total_notes=notes.count(),
        active_users=len(active),
        recent_books=books.count_since(since),
        recent_notes=notes.count_since(since),
        popular_books=[
            PopularBookOut(id=b.id, title=b.title, author=b.author, note_count=n)
            for b, n in books.most_annotated(POPULAR_BOOKS_LIMIT)
        ],
    )
