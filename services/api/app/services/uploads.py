"""Upload flows that pair blob writes with record inserts.

Blobs are written first and the record second. When the insert fails, every
blob written for that upload is deleted again before the error propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.core.errors import AppError, StorageError, ValidationError
from app.crud.books import BookStore
from app.models.book import Book
from app.schemas.books import BookCreate
from app.storage.blob_store import BlobStore, make_blob_key
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

BOOKS_PREFIX = "books"
COVERS_PREFIX = "covers"
NOTES_PREFIX = "notes"


@dataclass(frozen=True)
class IncomingFile:
    filename: str
    content_type: str | None
    data: bytes


@dataclass(frozen=True)
class StoredUpload:
    key: str
    size: int


def _discard_blobs(blob_store: BlobStore, keys: list[str]) -> None:
    for key in keys:
        try:
            blob_store.delete(key)
        except AppError:
            logger.exception("could not discard orphaned blob", extra={"key": key})


def store_file(
    blob_store: BlobStore,
    *,
    prefix: str,
    upload: IncomingFile,
    metadata: dict[str, str] | None = None,
) -> StoredUpload:
    key = make_blob_key(prefix, upload.filename)
    meta = {"fileName": upload.filename, **(metadata or {})}
    blob_store.put(upload.data, key, upload.content_type, meta)
    return StoredUpload(key=key, size=len(upload.data))


def upload_book(
    books: BookStore,
    blob_store: BlobStore,
    *,
    title: str,
    author: str,
    description: str | None,
    book_file: IncomingFile | None,
    cover_file: IncomingFile | None,
    uploaded_by: int,
) -> Book:
    title = (title or "").strip()
    author = (author or "").strip()
    if not title or not author:
        raise ValidationError("title and author are required")
    if book_file is None or not book_file.filename:
        raise ValidationError("bookFile is required")

    written: list[str] = []
    try:
        meta = {"title": title, "author": author}
        book_blob = store_file(blob_store, prefix=BOOKS_PREFIX, upload=book_file, metadata=meta)
        written.append(book_blob.key)

        cover_key: str | None = None
        if cover_file is not None and cover_file.filename:
            cover_blob = store_file(
                blob_store, prefix=COVERS_PREFIX, upload=cover_file, metadata=meta
            )
            written.append(cover_blob.key)
            cover_key = cover_blob.key

        book = books.create(
            BookCreate(
                title=title,
                author=author,
                description=description or None,
                cover_url=cover_key,
                file_url=book_blob.key,
                uploaded_by=uploaded_by,
            )
        )
    except AppError:
        _discard_blobs(blob_store, written)
        raise
    except PydanticValidationError as exc:
        _discard_blobs(blob_store, written)
        raise ValidationError(str(exc.errors()[0]["msg"])) from exc
    except Exception as exc:
        _discard_blobs(blob_store, written)
        logger.exception("book upload failed", extra={"title": title})
        raise StorageError("Book upload failed") from exc

    logger.info(
        "book uploaded",
        extra={"book_id": book.id, "file_key": book.file_url, "cover_key": book.cover_url},
    )
    return book


def upload_note_file(
    blob_store: BlobStore,
    *,
    title: str,
    author: str,
    note_file: IncomingFile | None,
) -> StoredUpload:
    title = (title or "").strip()
    author = (author or "").strip()
    if not title or not author:
        raise ValidationError("title and author are required")
    if note_file is None or not note_file.filename:
        raise ValidationError("noteFile is required")

    return store_file(
        blob_store,
        prefix=NOTES_PREFIX,
        upload=note_file,
        metadata={"title": title, "author": author},
    )


def is_blob_key(ref: str | None) -> bool:
    """Stored references are either our own blob keys or external URLs."""
    if not ref:
        return False
    return "://" not in ref and not ref.startswith("/")


def remove_book_blobs(
    blob_store: BlobStore, *, book_id: int, refs: tuple[str | None, ...]
) -> None:
    """Best-effort cleanup after a book row is gone; failures are only logged."""
    for ref in refs:
        if not is_blob_key(ref):
            continue
        try:
            removed = blob_store.delete(ref)  # type: ignore[arg-type]
        except Exception:
            logger.exception("blob cleanup failed", extra={"book_id": book_id, "key": ref})
            continue
        if not removed:
            logger.info("blob already absent", extra={"book_id": book_id, "key": ref})
