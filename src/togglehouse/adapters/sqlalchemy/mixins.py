"""SQLAlchemy ORM mixins – CreatedAtMixin, ArchivableMixin."""
from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, mapped_column


class CreatedAtMixin:
    """Adds a ``created_at`` column defaulting to the database server's now."""

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class ArchivableMixin:
    """Adds a nullable ``archived_at`` timestamp for soft-deletion.

    ``archived_at`` is ``NULL`` for active rows. Archived rows stay in the
    table so unique constraints keep covering them::

        stmt = select(FeatureRow).where(FeatureRow.active_filter())
    """

    archived_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        index=True,
    )

    @classmethod
    def active_filter(cls) -> Any:
        """Return a column expression ``<cls>.archived_at IS NULL``."""
        return cls.archived_at.is_(None)  # type: ignore[attr-defined]

    @classmethod
    def archived_filter(cls) -> Any:
        return cls.archived_at.is_not(None)  # type: ignore[attr-defined]


__all__ = ["ArchivableMixin", "CreatedAtMixin"]
