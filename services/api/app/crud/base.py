"""Generic single-table CRUD gateway.

Each operation is one statement followed by a commit; nothing here spans two
record kinds.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Generic, Sequence, TypeVar, cast

from app.core.errors import StorageError, StorageWriteError
from app.models.base import Base
from pydantic import BaseModel
from sqlalchemy import delete, func, select
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class RecordStore(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    @property
    def kind(self) -> str:
        return self.model.__name__

    def create(self, data: BaseModel) -> ModelT:
        obj = self.model(**data.model_dump())
        self.db.add(obj)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("%s insert rejected: %s", self.kind, exc.orig)
            raise StorageWriteError(f"{self.kind} could not be created") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageWriteError(f"{self.kind} could not be created") from exc
        self.db.refresh(obj)
        return obj

    def get_by_id(self, record_id: int) -> ModelT | None:
        return self.db.get(self.model, record_id)

    def get_all(self) -> Sequence[ModelT]:
        return self._list()

    def update(self, record_id: int, patch: BaseModel) -> ModelT | None:
        obj = self.db.get(self.model, record_id)
        if obj is None:
            return None

        # Only the fields the caller actually supplied; an explicit None clears a column.
        changes: dict[str, Any] = patch.model_dump(exclude_unset=True)
        if not changes:
            return obj

        for field, value in changes.items():
            setattr(obj, field, value)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageWriteError(f"{self.kind} {record_id} could not be updated") from exc
        self.db.refresh(obj)
        return obj

    def delete(self, record_id: int) -> bool:
        stmt = delete(self.model).where(self.model.id == record_id)  # type: ignore[attr-defined]
        try:
            res = cast(CursorResult[Any], self.db.execute(stmt))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageWriteError(f"{self.kind} {record_id} could not be deleted") from exc
        # The identity map may still hold the deleted row.
        self.db.expire_all()
        return int(res.rowcount or 0) > 0

    def exists(self, record_id: int) -> bool:
        return self.get_by_id(record_id) is not None

    def count(self) -> int:
        return self._count()

    def count_since(self, moment: datetime) -> int:
        return self._count(self.model.created_at >= moment)  # type: ignore[attr-defined]

    def _list(self, *criteria: Any) -> Sequence[ModelT]:
        stmt = select(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        stmt = stmt.order_by(
            self.model.created_at.desc(),  # type: ignore[attr-defined]
            self.model.id.desc(),  # type: ignore[attr-defined]
        )
        try:
            return self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError(f"{self.kind} listing failed") from exc

    def _count(self, *criteria: Any) -> int:
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        return int(self.db.execute(stmt).scalar_one())
