"""Toggle domain – value objects, events, ports and services."""
from togglehouse.application.toggles.event_service import EventService
from togglehouse.application.toggles.events import Event, EventType
from togglehouse.application.toggles.models import (
    FeatureQuery,
    FeatureStatus,
    FeatureToggle,
    Strategy,
    Tag,
    Variant,
    VariantPayload,
)
from togglehouse.application.toggles.ports import EventStore, FeatureToggleStore, TagStore
from togglehouse.application.toggles.tag_service import TagService
from togglehouse.application.toggles.toggle_service import (
    ARCHIVED_TOGGLE_EXISTS,
    TOGGLE_EXISTS,
    FeatureToggleService,
)

__all__ = [
    "ARCHIVED_TOGGLE_EXISTS",
    "Event",
    "EventService",
    "EventStore",
    "EventType",
    "FeatureQuery",
    "FeatureStatus",
    "FeatureToggle",
    "FeatureToggleService",
    "FeatureToggleStore",
    "Strategy",
    "TOGGLE_EXISTS",
    "Tag",
    "TagService",
    "TagStore",
    "Variant",
    "VariantPayload",
]
