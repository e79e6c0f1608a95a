from __future__ import annotations

import logging

from app.api.deps import get_blob_store, get_book_store, get_note_store, get_user_store
from app.api.routes.files import download_url, list_files_under, to_incoming_file
from app.core.errors import NotFoundError, ValidationError
from app.crud.books import BookStore
from app.crud.notes import NoteStore
from app.crud.users import UserStore
from app.schemas.files import FileListOut, NoteUploadOut
from app.schemas.notes import NoteCreate, NoteOut, NoteUpdate
from app.services.uploads import NOTES_PREFIX, upload_note_file
from app.storage.blob_store import BlobStore
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def _check_references(
    *,
    book_id: int | None,
    user_id: int | None,
    books: BookStore,
    users: UserStore,
) -> None:
    if book_id is not None and not books.exists(book_id):
        raise ValidationError(f"Book {book_id} does not exist")
    if user_id is not None and not users.exists(user_id):
        raise ValidationError(f"User {user_id} does not exist")


@router.get("", response_model=list[NoteOut])
def list_notes(
    book_id: int | None = Query(default=None),
    user_id: int | None = Query(default=None),
    notes: NoteStore = Depends(get_note_store),
):
    if book_id is not None and user_id is not None:
        return [n for n in notes.get_by_book_id(book_id) if n.user_id == user_id]
    if book_id is not None:
        return notes.get_by_book_id(book_id)
    if user_id is not None:
        return notes.get_by_user_id(user_id)
    return notes.get_all()


@router.post("", response_model=NoteOut, status_code=201)
def create_note(
    payload: NoteCreate,
    notes: NoteStore = Depends(get_note_store),
    books: BookStore = Depends(get_book_store),
    users: UserStore = Depends(get_user_store),
):
    _check_references(book_id=payload.book_id, user_id=payload.user_id, books=books, users=users)
    note = notes.create(payload)
    logger.info("note created", extra={"note_id": note.id, "book_id": note.book_id})
    return note


@router.post("/upload", response_model=NoteUploadOut, status_code=201)
def upload_note(
    title: str | None = Form(default=None),
    author: str | None = Form(default=None),
    noteFile: UploadFile | None = File(default=None),
    blob_store: BlobStore = Depends(get_blob_store),
):
    stored = upload_note_file(
        blob_store,
        title=title or "",
        author=author or "",
        note_file=to_incoming_file(noteFile),
    )
    return NoteUploadOut(
        key=stored.key,
        url=download_url(stored.key),
        title=(title or "").strip(),
        author=(author or "").strip(),
        size=stored.size,
    )


@router.get("/files/list", response_model=FileListOut)
def list_note_files(blob_store: BlobStore = Depends(get_blob_store)):
    return list_files_under(blob_store, f"{NOTES_PREFIX}/")


@router.get("/{note_id}", response_model=NoteOut)
def get_note(note_id: int, notes: NoteStore = Depends(get_note_store)):
    note = notes.get_by_id(note_id)
    if note is None:
        raise NotFoundError("Note", note_id)
    return note


@router.put("/{note_id}", response_model=NoteOut)
def update_note(
    note_id: int,
    payload: NoteUpdate,
    notes: NoteStore = Depends(get_note_store),
    books: BookStore = Depends(get_book_store),
    users: UserStore = Depends(get_user_store),
):
    if not notes.exists(note_id):
        raise NotFoundError("Note", note_id)
    _check_references(book_id=payload.book_id, user_id=None, books=books, users=users)

    note = notes.update(note_id, payload)
    if note is None:
        raise NotFoundError("Note", note_id)
    return note


@router.delete("/{note_id}", response_class=PlainTextResponse)
def delete_note(note_id: int, notes: NoteStore = Depends(get_note_store)):
    if not notes.delete(note_id):
        raise NotFoundError("Note", note_id)
    return "Note deleted"
