"""Toggle domain – FeatureToggleService.

Validates definitions, enforces name uniqueness across active and archived
toggles, and emits one audit event per state change. Tag snapshots are read
at emission time so each event records the tags attached at that moment.
"""
from __future__ import annotations

from togglehouse.application.toggles.event_service import EventService
from togglehouse.application.toggles.events import EventType
from togglehouse.application.toggles.models import (
    ARCHIVED_TOGGLE_EXISTS,
    TOGGLE_EXISTS,
    FeatureQuery,
    FeatureStatus,
    FeatureToggle,
    Tag,
)
from togglehouse.application.toggles.ports import FeatureToggleStore, TagStore
from togglehouse.application.toggles.validation import (
    validate_name,
    validate_tag,
    validate_toggle,
)
from togglehouse.kernel.errors import ConflictError, NotFoundError
from togglehouse.kernel.time import Clock, SystemClock
from togglehouse.observability.logging import get_logger

logger = get_logger(__name__)


class FeatureToggleService:
    def __init__(
        self,
        features: FeatureToggleStore,
        tags: TagStore,
        events: EventService,
        clock: Clock | None = None,
    ) -> None:
        self._features = features
        self._tags = tags
        self._events = events
        self._clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_features(self, query: FeatureQuery | None = None) -> list[FeatureToggle]:
        return await self._features.get_features(query)

    async def get_feature(self, name: str) -> FeatureToggle:
        return await self._features.get_feature(name)

    async def get_archived_features(self) -> list[FeatureToggle]:
        return await self._features.get_archived_features()

    async def get_tags_for_feature(self, name: str) -> list[Tag]:
        await self._features.get_feature(name)
        return await self._features.get_tags_for_feature(name)

    # ------------------------------------------------------------------
    # Name checks
    # ------------------------------------------------------------------

    async def validate_unique_name(self, name: str) -> None:
        status = await self._features.has_feature(name)
        if status is FeatureStatus.ACTIVE:
            raise ConflictError(TOGGLE_EXISTS, detail={"name": name})
        if status is FeatureStatus.ARCHIVED:
            raise ConflictError(ARCHIVED_TOGGLE_EXISTS, detail={"name": name})

    async def validate_name(self, name: str) -> None:
        validate_name(name)
        await self.validate_unique_name(name)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_feature(self, toggle: FeatureToggle) -> FeatureToggle:
        validate_toggle(toggle)
        await self.validate_unique_name(toggle.name)
        created = await self._features.create_feature(
            toggle.copy_with(created_at=self._clock.now())
        )
        await self._events.emit(EventType.FEATURE_CREATED, created.to_dict())
        logger.info("toggle created", toggle=created.name, project=created.project)
        return created

    async def update_feature(self, name: str, toggle: FeatureToggle) -> FeatureToggle:
        toggle = toggle.copy_with(name=name)
        validate_toggle(toggle)
        existing = await self._features.get_feature(name)
        updated = await self._features.update_feature(
            toggle.copy_with(created_at=existing.created_at)
        )
        await self._emit_with_tags(EventType.FEATURE_UPDATED, updated)
        logger.info("toggle updated", toggle=name)
        return updated

    async def toggle(self, name: str, enabled: bool | None = None) -> FeatureToggle:
        """Set ``enabled``; ``None`` flips the current state."""
        feature = await self._features.get_feature(name)
        new_state = (not feature.enabled) if enabled is None else enabled
        updated = await self._features.update_feature(feature.copy_with(enabled=new_state))
        await self._emit_with_tags(EventType.FEATURE_UPDATED, updated)
        logger.info("toggle switched", toggle=name, enabled=new_state)
        return updated

    async def set_stale(self, name: str, stale: bool) -> FeatureToggle:
        feature = await self._features.get_feature(name)
        updated = await self._features.update_feature(feature.copy_with(stale=stale))
        event_type = EventType.FEATURE_STALE_ON if stale else EventType.FEATURE_STALE_OFF
        await self._emit_with_tags(event_type, updated)
        logger.info("toggle stale flag set", toggle=name, stale=stale)
        return updated

    async def archive(self, name: str) -> None:
        await self._features.get_feature(name)
        tags = await self._features.get_tags_for_feature(name)
        await self._features.archive_feature(name)
        await self._events.emit(EventType.FEATURE_ARCHIVED, {"name": name}, tags)
        logger.info("toggle archived", toggle=name, tags=len(tags))

    async def revive(self, name: str) -> None:
        if await self._features.has_feature(name) is not FeatureStatus.ARCHIVED:
            raise NotFoundError(
                f"No archived toggle named '{name}'",
                resource="feature",
                identifier=name,
            )
        await self._features.revive_feature(name)
        tags = await self._features.get_tags_for_feature(name)
        await self._events.emit(EventType.FEATURE_REVIVED, {"name": name}, tags)
        logger.info("toggle revived", toggle=name)

    async def tag_feature(self, name: str, tag: Tag) -> Tag:
        validate_tag(tag)
        await self._features.get_feature(name)
        if not await self._tags.exists(tag):
            await self._tags.create_tag(tag)
            await self._events.emit(EventType.TAG_CREATED, tag.to_dict())
        await self._features.tag_feature(name, tag)
        tags = await self._features.get_tags_for_feature(name)
        await self._events.emit(
            EventType.FEATURE_TAGGED, {"name": name, "tag": tag.to_dict()}, tags
        )
        logger.info("toggle tagged", toggle=name, tag_type=tag.type, tag_value=tag.value)
        return tag

    async def untag_feature(self, name: str, tag: Tag) -> None:
        await self._features.get_feature(name)
        await self._features.untag_feature(name, tag)
        tags = await self._features.get_tags_for_feature(name)
        await self._events.emit(
            EventType.FEATURE_UNTAGGED, {"name": name, "tag": tag.to_dict()}, tags
        )
        logger.info("toggle untagged", toggle=name, tag_type=tag.type, tag_value=tag.value)

    async def _emit_with_tags(self, event_type: EventType, toggle: FeatureToggle) -> None:
        tags = await self._features.get_tags_for_feature(toggle.name)
        await self._events.emit(event_type, toggle.to_dict(), tags)


__all__ = ["ARCHIVED_TOGGLE_EXISTS", "FeatureToggleService", "TOGGLE_EXISTS"]
