from __future__ import annotations

from datetime import datetime

from app.models.base import Base, utcnow
from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column


class Book(Base):
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("length(file_url) > 0", name="ck_books_file_url_nonempty"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Blob keys (e.g. "books/1700000000000-plato.pdf") or absolute URLs
    cover_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)

    uploaded_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True, nullable=False
    )
