"""SQLAlchemy ORM models for content items and their metadata."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base

STATUS_PUBLISH = "publish"
STATUS_DRAFT = "draft"


class TimestampMixin:
    """Mixin providing created/updated timestamps."""

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now(), nullable=False
    )


class ContentItem(TimestampMixin, Base):
    __tablename__ = "content_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(512), default="", nullable=False)
    body: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=STATUS_PUBLISH, nullable=False)

    meta: Mapped[list[ItemMeta]] = relationship(
        "ItemMeta", back_populates="item", cascade="all, delete-orphan"
    )

    def find_meta(self, key: str) -> Optional[ItemMeta]:
        for row in self.meta:
            if row.meta_key == key:
                return row
        return None

    def get_meta(self, key: str) -> str:
        """Return the stored value for ``key`` or an empty string."""
        row = self.find_meta(key)
        if row is None or row.meta_value is None:
            return ""
        return row.meta_value


class ItemMeta(Base):
    __tablename__ = "item_meta"
    __table_args__ = (UniqueConstraint("item_id", "meta_key", name="uq_item_meta_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(
        ForeignKey("content_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    meta_key: Mapped[str] = mapped_column(String(255), nullable=False)
    meta_value: Mapped[Optional[str]] = mapped_column(Text)

    item: Mapped[ContentItem] = relationship("ContentItem", back_populates="meta")
