from __future__ import annotations

from pydantic import BaseModel


class PopularBookOut(BaseModel):
    id: int
    title: str
    author: str
    note_count: int


class StatisticsOut(BaseModel):
    total_users: int
    total_books: int
    total_notes: int
    active_users: int
    recent_books: int
    recent_notes: int
    popular_books: list[PopularBookOut]
