"""Toggle domain – EventService: stamps and appends audit events."""
from __future__ import annotations

from typing import Any, Iterable

from togglehouse.application.toggles.events import Event, EventType
from togglehouse.application.toggles.models import Tag
from togglehouse.application.toggles.ports import EventStore
from togglehouse.kernel.time import Clock, SystemClock


class EventService:
    """Build events from domain actions and append them to the store."""

    def __init__(self, store: EventStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()

    async def emit(
        self,
        event_type: EventType,
        data: dict[str, Any],
        tags: Iterable[Tag] = (),
    ) -> Event:
        event = Event(
            type=event_type,
            data=dict(data),
            tags=tuple(Tag(t.type, t.value) for t in tags),
            created_at=self._clock.now(),
        )
        return await self._store.append(event)

    async def get_events(self) -> list[Event]:
        return await self._store.get_events()

    async def get_events_for_feature(self, name: str) -> list[Event]:
        return await self._store.get_events_for_feature(name)


__all__ = ["EventService"]
