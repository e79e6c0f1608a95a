"""Object storage addressed by slash-separated keys.

``LocalBlobStore`` keeps object bytes under ``<root>/data/<key>`` and a JSON
sidecar with content type, etag, upload time and custom metadata under
``<root>/meta/<key>.json``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Mapping, Protocol

from app.core.errors import StorageError, StorageWriteError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_LIST_LIMIT = 100


@dataclass(frozen=True)
class BlobInfo:
    key: str
    size: int
    uploaded: datetime
    etag: str


@dataclass(frozen=True)
class StoredBlob:
    key: str
    body: bytes
    content_type: str
    size: int
    etag: str
    uploaded: datetime
    metadata: dict[str, str] = field(default_factory=dict)


class BlobStore(Protocol):
    def put(
        self,
        data: bytes,
        path: str,
        content_type: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str: ...

    def get(self, path: str) -> StoredBlob | None: ...

    def list(self, prefix: str = "", limit: int = DEFAULT_LIST_LIMIT) -> list[BlobInfo]: ...

    def delete(self, path: str) -> bool: ...


def validate_key(key: str) -> str:
    if not key or key.startswith("/") or "\\" in key or "\x00" in key:
        raise ValidationError(f"Invalid storage key: {key!r}")
    parts = key.split("/")
    if any(p in ("", ".", "..") for p in parts):
        raise ValidationError(f"Invalid storage key: {key!r}")
    return key


def make_blob_key(prefix: str, filename: str, *, now_ms: int | None = None) -> str:
    """Build ``{prefix}/{epoch-millis}-{name}`` from an uploaded file name."""
    # Browsers may send a full client path; keep the last component only.
    name = PurePosixPath(filename.replace("\\", "/")).name.strip()
    if not name or name in (".", ".."):
        raise ValidationError("Uploaded file has no usable name")
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return validate_key(f"{prefix.strip('/')}/{now_ms}-{name}")


def _is_partial_write(name: str) -> bool:
    # Matches the temp files left by an interrupted _write_atomic.
    return name.startswith(".") and name.endswith(".tmp")


class LocalBlobStore:
    def __init__(self, root: str | os.PathLike[str]):
        self.root = Path(root)
        self.data_dir = self.root / "data"
        self.meta_dir = self.root / "meta"

    def _data_path(self, key: str) -> Path:
        return self.data_dir.joinpath(*validate_key(key).split("/"))

    def _meta_path(self, key: str) -> Path:
        parts = validate_key(key).split("/")
        parts[-1] = parts[-1] + ".json"
        return self.meta_dir.joinpath(*parts)

    @staticmethod
    def _write_atomic(target: Path, payload: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.tmp")
        tmp.write_bytes(payload)
        os.replace(tmp, target)

    def put(
        self,
        data: bytes,
        path: str,
        content_type: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        data_path = self._data_path(path)
        meta_path = self._meta_path(path)
        sidecar = {
            "content_type": content_type or DEFAULT_CONTENT_TYPE,
            "etag": hashlib.md5(data).hexdigest(),
            "uploaded": datetime.now(timezone.utc).isoformat(),
            "metadata": {str(k): str(v) for k, v in (metadata or {}).items()},
        }
        try:
            self._write_atomic(data_path, data)
            self._write_atomic(meta_path, json.dumps(sidecar).encode("utf-8"))
        except OSError as exc:
            logger.error("blob write failed", extra={"key": path, "error": str(exc)})
            raise StorageWriteError(f"Could not store {path}") from exc

        logger.info("blob stored", extra={"key": path, "size": len(data)})
        return path

    def _read_sidecar(self, key: str, data_path: Path) -> dict:
        meta_path = self._meta_path(key)
        try:
            return json.loads(meta_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            # Objects dropped into the data tree by hand have no sidecar.
            stat = data_path.stat()
            return {
                "content_type": DEFAULT_CONTENT_TYPE,
                "etag": hashlib.md5(data_path.read_bytes()).hexdigest(),
                "uploaded": datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(),
                "metadata": {},
            }

    def get(self, path: str) -> StoredBlob | None:
        data_path = self._data_path(path)
        # A key that names a "directory" of other keys is not an object.
        if not data_path.is_file():
            return None
        try:
            body = data_path.read_bytes()
            sidecar = self._read_sidecar(path, data_path)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not read {path}") from exc

        return StoredBlob(
            key=path,
            body=body,
            content_type=sidecar.get("content_type") or DEFAULT_CONTENT_TYPE,
            size=len(body),
            etag=sidecar.get("etag") or hashlib.md5(body).hexdigest(),
            uploaded=datetime.fromisoformat(sidecar["uploaded"]),
            metadata=dict(sidecar.get("metadata") or {}),
        )

    def list(self, prefix: str = "", limit: int = DEFAULT_LIST_LIMIT) -> list[BlobInfo]:
        """Up to ``limit`` objects whose key starts with ``prefix``, in key order.

        There is no continuation token; callers must not assume a full listing
        when a prefix holds more than ``limit`` objects.
        """
        if limit <= 0 or not self.data_dir.is_dir():
            return []

        keys: list[str] = []
        try:
            for p in self.data_dir.rglob("*"):
                if not p.is_file() or _is_partial_write(p.name):
                    continue
                key = p.relative_to(self.data_dir).as_posix()
                if key.startswith(prefix):
                    keys.append(key)
        except OSError as exc:
            raise StorageError(f"Could not list {prefix!r}") from exc

        out: list[BlobInfo] = []
        for key in sorted(keys)[:limit]:
            data_path = self._data_path(key)
            try:
                sidecar = self._read_sidecar(key, data_path)
                size = data_path.stat().st_size
            except FileNotFoundError:
                # Deleted between the walk and the stat.
                continue
            out.append(
                BlobInfo(
                    key=key,
                    size=size,
                    uploaded=datetime.fromisoformat(sidecar["uploaded"]),
                    etag=sidecar.get("etag", ""),
                )
            )
        return out

    def delete(self, path: str) -> bool:
        data_path = self._data_path(path)
        meta_path = self._meta_path(path)
        if not data_path.is_file():
            return False
        try:
            meta_path.unlink(missing_ok=True)
            data_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Could not delete {path}") from exc
        logger.info("blob deleted", extra={"key": path})
        return True
