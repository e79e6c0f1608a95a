from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class StoredFileOut(BaseModel):
    key: str
    size: int
    uploaded: datetime
    url: str


class FileListOut(BaseModel):
    files: list[StoredFileOut]


class NoteUploadOut(BaseModel):
    key: str
    url: str
    title: str
    author: str
    size: int
