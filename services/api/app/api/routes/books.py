from __future__ import annotations

import logging

from app.api.deps import (
    get_blob_store,
    get_book_store,
    get_user_store,
    require_admin,
    resolve_admin,
)
from app.api.routes.files import list_files_under, to_incoming_file
from app.core.errors import NotFoundError
from app.crud.books import BookStore
from app.crud.users import UserStore
from app.schemas.books import BookOut, BookUpdate
from app.schemas.files import FileListOut
from app.services.uploads import BOOKS_PREFIX, remove_book_blobs, upload_book
from app.storage.blob_store import BlobStore
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["books"])


@router.get("/books", response_model=list[BookOut])
def list_books(books: BookStore = Depends(get_book_store)):
    return books.get_all()


# Registered before /books/{book_id} so "files" is not parsed as an id.
@router.get("/books/files/list", response_model=FileListOut)
def list_book_files(blob_store: BlobStore = Depends(get_blob_store)):
    return list_files_under(blob_store, f"{BOOKS_PREFIX}/")


@router.get("/books/{book_id}", response_model=BookOut)
def get_book(book_id: int, books: BookStore = Depends(get_book_store)):
    book = books.get_by_id(book_id)
    if book is None:
        raise NotFoundError("Book", book_id)
    return book


@router.patch("/books/{book_id}", response_model=BookOut, dependencies=[Depends(require_admin)])
def update_book(book_id: int, payload: BookUpdate, books: BookStore = Depends(get_book_store)):
    book = books.update(book_id, payload)
    if book is None:
        raise NotFoundError("Book", book_id)
    return book


@router.delete(
    "/books/{book_id}",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_admin)],
)
def delete_book(
    book_id: int,
    books: BookStore = Depends(get_book_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    book = books.get_by_id(book_id)
    if book is None:
        raise NotFoundError("Book", book_id)

    refs = (book.file_url, book.cover_url)
    if not books.delete(book_id):
        raise NotFoundError("Book", book_id)

    # The row is gone either way; stray blobs are only logged.
    remove_book_blobs(blob_store, book_id=book_id, refs=refs)
    logger.info("book deleted", extra={"book_id": book_id})
    return "Book deleted"


@router.post("/admin/upload-book", response_model=BookOut, status_code=201)
def admin_upload_book(
    title: str | None = Form(default=None),
    author: str | None = Form(default=None),
    description: str | None = Form(default=None),
    userId: str | None = Form(default=None),
    bookFile: UploadFile | None = File(default=None),
    coverFile: UploadFile | None = File(default=None),
    users: UserStore = Depends(get_user_store),
    books: BookStore = Depends(get_book_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    uploader = resolve_admin(users, userId)

    return upload_book(
        books,
        blob_store,
        title=title or "",
        author=author or "",
        description=description,
        book_file=to_incoming_file(bookFile),
        cover_file=to_incoming_file(coverFile),
        uploaded_by=uploader.id,
    )
