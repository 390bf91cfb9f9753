"""SQLAlchemy adapter – declarative table models.

Tables: ``features``, ``tags``, ``feature_tag`` and ``events``. Schema
migrations are out of scope; :meth:`SqlAlchemySessionFactory.create_schema`
runs ``metadata.create_all``.
"""
from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from togglehouse.adapters.sqlalchemy.mixins import ArchivableMixin, CreatedAtMixin


class Base(DeclarativeBase):
    pass


class FeatureRow(ArchivableMixin, CreatedAtMixin, Base):
    """One toggle, active or archived.

    ``id`` only provides insertion order; ``name`` is the natural key and is
    unique across active and archived rows.
    """

    __tablename__ = "features"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(64), nullable=False, default="release")
    project: Mapped[str] = mapped_column(String(255), nullable=False, default="default", index=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    stale: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    strategies: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    variants: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)


class TagRow(CreatedAtMixin, Base):
    __tablename__ = "tags"

    type: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(String(255), primary_key=True)


class FeatureTagRow(Base):
    __tablename__ = "feature_tag"

    feature_name: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("features.name", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_type: Mapped[str] = mapped_column(String(255), primary_key=True)
    tag_value: Mapped[str] = mapped_column(String(255), primary_key=True)

    __table_args__ = (
        ForeignKeyConstraint(
            ["tag_type", "tag_value"],
            ["tags.type", "tags.value"],
            ondelete="CASCADE",
        ),
    )


class EventRow(Base):
    """Append-only audit row. ``tags`` holds a by-value copy, not a reference."""

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    feature_name: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    tags: Mapped[list[dict[str, str]]] = mapped_column(JSON, nullable=False, default=list)


__all__ = ["Base", "EventRow", "FeatureRow", "FeatureTagRow", "TagRow"]
