"""Toggle domain – audit events."""
from __future__ import annotations

import dataclasses
import enum
from datetime import datetime
from typing import Any

from togglehouse.application.toggles.models import Tag


class EventType(str, enum.Enum):
    FEATURE_CREATED = "feature-created"
    FEATURE_UPDATED = "feature-updated"
    FEATURE_ARCHIVED = "feature-archived"
    FEATURE_REVIVED = "feature-revived"
    FEATURE_TAGGED = "feature-tagged"
    FEATURE_UNTAGGED = "feature-untagged"
    FEATURE_STALE_ON = "feature-stale-on"
    FEATURE_STALE_OFF = "feature-stale-off"
    TAG_CREATED = "tag-created"
    TAG_DELETED = "tag-deleted"
    TAG_IMPORT = "tag-import"


@dataclasses.dataclass(frozen=True)
class Event:
    """Immutable audit record of a state-changing action.

    ``tags`` is a by-value snapshot taken when the event is built; later
    changes to the tag set never reach stored events.
    """

    type: EventType
    data: dict[str, Any]
    tags: tuple[Tag, ...] = ()
    created_at: datetime | None = None
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "data": self.data,
            "tags": [t.to_dict() for t in self.tags],
        }


__all__ = ["Event", "EventType"]
