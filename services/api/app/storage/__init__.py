from app.storage.blob_store import (
    BlobInfo,
    BlobStore,
    LocalBlobStore,
    StoredBlob,
    make_blob_key,
    validate_key,
)


__all__ = [
    "BlobInfo",
    "BlobStore",
    "LocalBlobStore",
    "StoredBlob",
    "make_blob_key",
    "validate_key",
]
