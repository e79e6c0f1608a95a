from __future__ import annotations

from app.api.deps import get_book_store, get_note_store, get_user_store, require_admin
from app.crud.books import BookStore
from app.crud.notes import NoteStore
from app.crud.users import UserStore
from app.schemas.statistics import StatisticsOut
from app.services.statistics import compute_statistics
from fastapi import APIRouter, Depends

router = APIRouter(tags=["statistics"])


@router.get("/statistics", response_model=StatisticsOut, dependencies=[Depends(require_admin)])
def get_statistics(
    users: UserStore = Depends(get_user_store),
    books: BookStore = Depends(get_book_store),
    notes: NoteStore = Depends(get_note_store),
):
    return compute_statistics(users, books, notes)
