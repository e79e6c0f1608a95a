from __future__ import annotations

from urllib.parse import quote

from app.api.deps import get_blob_store
from app.core.config import settings
from app.core.errors import NotFoundError
from app.schemas.files import FileListOut, StoredFileOut
from app.services.uploads import IncomingFile
from app.storage.blob_store import BlobStore
from fastapi import APIRouter, Depends, Response, UploadFile

router = APIRouter(tags=["files"])


def download_url(key: str) -> str:
    return f"{settings.api_prefix}/files/{quote(key, safe='/')}"


def to_incoming_file(upload: UploadFile | None) -> IncomingFile | None:
    if upload is None or not upload.filename:
        return None
    return IncomingFile(
        filename=upload.filename,
        content_type=upload.content_type,
        data=upload.file.read(),
    )


def list_files_under(blob_store: BlobStore, prefix: str) -> FileListOut:
    return FileListOut(
        files=[
            StoredFileOut(key=b.key, size=b.size, uploaded=b.uploaded, url=download_url(b.key))
            for b in blob_store.list(prefix, limit=settings.blob_list_limit)
        ]
    )


@router.get("/files/{path:path}")
def get_file(path: str, blob_store: BlobStore = Depends(get_blob_store)):
    blob = blob_store.get(path)
    if blob is None:
        raise NotFoundError("File", path)

    return Response(
        content=blob.body,
        media_type=blob.content_type,
        headers={
            "Content-Length": str(blob.size),
            "ETag": f'"{blob.etag}"',
        },
    )
