"""Toggle domain – store ports implemented by the persistence adapters."""
from __future__ import annotations

import abc

from togglehouse.application.toggles.events import Event
from togglehouse.application.toggles.models import (
    FeatureQuery,
    FeatureStatus,
    FeatureToggle,
    Tag,
)


class TagStore(abc.ABC):
    """Port: CRUD over ``(type, value)`` tags."""

    @abc.abstractmethod
    async def get_all(self) -> list[Tag]: ...

    @abc.abstractmethod
    async def get_tags_by_type(self, tag_type: str) -> list[Tag]: ...

    @abc.abstractmethod
    async def get_tag(self, tag_type: str, value: str) -> Tag:
        """Return the tag or raise :class:`NotFoundError`."""

    @abc.abstractmethod
    async def exists(self, tag: Tag) -> bool: ...

    @abc.abstractmethod
    async def create_tag(self, tag: Tag) -> None:
        """Insert *tag*; raise :class:`ConflictError` if the key exists."""

    @abc.abstractmethod
    async def delete_tag(self, tag: Tag) -> None:
        """Delete *tag* and its toggle links; no-op when absent."""

    @abc.abstractmethod
    async def bulk_import(self, tags: list[Tag]) -> list[Tag]:
        """Insert *tags*, skipping existing keys; return the inserted ones."""

    @abc.abstractmethod
    async def drop_tags(self) -> None: ...


class FeatureToggleStore(abc.ABC):
    """Port: persistence of toggle definitions, archive state and tag links."""

    @abc.abstractmethod
    async def get_features(self, query: FeatureQuery | None = None) -> list[FeatureToggle]: ...

    @abc.abstractmethod
    async def get_feature(self, name: str) -> FeatureToggle:
        """Return the active toggle or raise :class:`NotFoundError`."""

    @abc.abstractmethod
    async def has_feature(self, name: str) -> FeatureStatus | None: ...

    @abc.abstractmethod
    async def create_feature(self, toggle: FeatureToggle) -> FeatureToggle: ...

    @abc.abstractmethod
    async def update_feature(self, toggle: FeatureToggle) -> FeatureToggle: ...

    @abc.abstractmethod
    async def archive_feature(self, name: str) -> None: ...

    @abc.abstractmethod
    async def revive_feature(self, name: str) -> None: ...

    @abc.abstractmethod
    async def get_archived_features(self) -> list[FeatureToggle]: ...

    @abc.abstractmethod
    async def add_archived_feature(self, toggle: FeatureToggle) -> None: ...

    @abc.abstractmethod
    async def tag_feature(self, name: str, tag: Tag) -> Tag: ...

    @abc.abstractmethod
    async def untag_feature(self, name: str, tag: Tag) -> None: ...

    @abc.abstractmethod
    async def get_tags_for_feature(self, name: str) -> list[Tag]: ...

    @abc.abstractmethod
    async def drop_features(self) -> None: ...


class EventStore(abc.ABC):
    """Port: append-only audit log."""

    @abc.abstractmethod
    async def append(self, event: Event) -> Event: ...

    @abc.abstractmethod
    async def get_events(self) -> list[Event]:
        """Return all events, most recent first."""

    @abc.abstractmethod
    async def get_events_for_feature(self, name: str) -> list[Event]: ...


__all__ = ["EventStore", "FeatureToggleStore", "TagStore"]
