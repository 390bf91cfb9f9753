"""SQLAlchemy adapter – SqlAlchemyEventStore."""
from __future__ import annotations

import dataclasses
from typing import Any

from sqlalchemy import insert, select

from togglehouse.adapters.sqlalchemy.errors import SqlAlchemyStoreBase
from togglehouse.adapters.sqlalchemy.models import EventRow
from togglehouse.application.toggles.events import Event, EventType
from togglehouse.application.toggles.models import Tag
from togglehouse.application.toggles.ports import EventStore
from togglehouse.kernel.time import utc_now


class SqlAlchemyEventStore(SqlAlchemyStoreBase, EventStore):
    """Append-only ``events`` table.

    Rows are never updated or deleted. Reads return the most recent event
    first, ordered by the autoincrement id. The toggle name found in
    ``data["name"]`` is copied into ``feature_name`` for per-toggle history.
    """

    STORE = "event"

    async def append(self, event: Event) -> Event:
        name = event.data.get("name")
        values = {
            "type": event.type.value,
            "created_at": event.created_at or utc_now(),
            "feature_name": name if isinstance(name, str) else None,
            "data": event.data,
            "tags": [t.to_dict() for t in event.tags],
        }
        with self._action("store"):
            result = await self._session.execute(insert(EventRow.__table__).values(**values))
        return dataclasses.replace(
            event,
            id=result.inserted_primary_key[0],
            created_at=values["created_at"],
        )

    async def get_events(self) -> list[Event]:
        with self._action("getEvents"):
            result = await self._session.execute(select(EventRow).order_by(EventRow.id.desc()))
            return [self._row_to_event(row) for row in result.scalars().all()]

    async def get_events_for_feature(self, name: str) -> list[Event]:
        with self._action("getEventsFilterByName"):
            result = await self._session.execute(
                select(EventRow)
                .where(EventRow.feature_name == name)
                .order_by(EventRow.id.desc())
            )
            return [self._row_to_event(row) for row in result.scalars().all()]

    @staticmethod
    def _row_to_event(row: Any) -> Event:
        return Event(
            id=row.id,
            type=EventType(row.type),
            created_at=row.created_at,
            data=dict(row.data or {}),
            tags=tuple(Tag(type=t["type"], value=t["value"]) for t in row.tags or []),
        )


__all__ = ["SqlAlchemyEventStore"]
