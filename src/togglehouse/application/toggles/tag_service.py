"""Toggle domain – TagService."""
from __future__ import annotations

from togglehouse.application.toggles.event_service import EventService
from togglehouse.application.toggles.events import EventType
from togglehouse.application.toggles.models import Tag
from togglehouse.application.toggles.ports import TagStore
from togglehouse.application.toggles.validation import validate_tag
from togglehouse.observability.logging import get_logger

logger = get_logger(__name__)


class TagService:
    def __init__(self, store: TagStore, events: EventService) -> None:
        self._store = store
        self._events = events

    async def get_tags(self) -> list[Tag]:
        return await self._store.get_all()

    async def get_tags_by_type(self, tag_type: str) -> list[Tag]:
        return await self._store.get_tags_by_type(tag_type)

    async def get_tag(self, tag_type: str, value: str) -> Tag:
        return await self._store.get_tag(tag_type, value)

    async def create_tag(self, tag: Tag) -> Tag:
        validate_tag(tag)
        await self._store.create_tag(tag)
        await self._events.emit(EventType.TAG_CREATED, tag.to_dict())
        logger.info("tag created", tag_type=tag.type, tag_value=tag.value)
        return tag

    async def delete_tag(self, tag: Tag) -> None:
        if not await self._store.exists(tag):
            return
        await self._store.delete_tag(tag)
        await self._events.emit(EventType.TAG_DELETED, tag.to_dict())
        logger.info("tag deleted", tag_type=tag.type, tag_value=tag.value)

    async def import_tags(self, tags: list[Tag]) -> list[Tag]:
        """Import *tags*, silently skipping keys that already exist.

        Only the inserted tags are returned, and no event is emitted when
        nothing was inserted.
        """
        for tag in tags:
            validate_tag(tag)
        inserted = await self._store.bulk_import(tags)
        if inserted:
            await self._events.emit(
                EventType.TAG_IMPORT, {"tags": [t.to_dict() for t in inserted]}
            )
        logger.info("tags imported", requested=len(tags), inserted=len(inserted))
        return inserted


__all__ = ["TagService"]
