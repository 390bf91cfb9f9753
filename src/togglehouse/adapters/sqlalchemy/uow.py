"""SQLAlchemy adapter – SqlAlchemyUnitOfWork."""
from __future__ import annotations

from typing import Any

from togglehouse.adapters.sqlalchemy.event_store import SqlAlchemyEventStore
from togglehouse.adapters.sqlalchemy.feature_toggle_store import SqlAlchemyFeatureToggleStore
from togglehouse.adapters.sqlalchemy.tag_store import SqlAlchemyTagStore
from togglehouse.observability.metrics import Metrics, NoopMetrics


class SqlAlchemyUnitOfWork:
    """One session, one transaction, three stores.

    Commits when the block exits cleanly and rolls back on any exception,
    so a toggle change and the event it emits land together or not at all::

        async with SqlAlchemyUnitOfWork(factory) as uow:
            await uow.features.create_feature(toggle)
            await uow.events.append(event)
    """

    def __init__(self, session_factory: Any, metrics: Metrics | None = None) -> None:
        self._factory = session_factory
        self._metrics = metrics or NoopMetrics()
        self.session: Any = None
        self.features: SqlAlchemyFeatureToggleStore
        self.tags: SqlAlchemyTagStore
        self.events: SqlAlchemyEventStore

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self._factory()
        self.features = SqlAlchemyFeatureToggleStore(self.session, self._metrics)
        self.tags = SqlAlchemyTagStore(self.session, self._metrics)
        self.events = SqlAlchemyEventStore(self.session, self._metrics)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self.session.close()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


__all__ = ["SqlAlchemyUnitOfWork"]
