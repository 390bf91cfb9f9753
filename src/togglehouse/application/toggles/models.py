"""Toggle domain – Tag, Strategy, Variant, FeatureToggle value objects."""
from __future__ import annotations

import dataclasses
import enum
from datetime import datetime
from typing import Any

TOGGLE_EXISTS = "A toggle with that name already exists"
ARCHIVED_TOGGLE_EXISTS = "An archived toggle with that name already exists"


@dataclasses.dataclass(frozen=True)
class Tag:
    """A ``(type, value)`` label; the pair is the natural key."""

    type: str
    value: str

    @classmethod
    def parse(cls, raw: str) -> "Tag":
        """Parse the ``type:value`` query-string form."""
        tag_type, sep, value = raw.partition(":")
        if not sep:
            raise ValueError(f"tag {raw!r} is not in the form type:value")
        return cls(type=tag_type, value=value)

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "value": self.value}


@dataclasses.dataclass(frozen=True)
class Strategy:
    """Named activation rule with string parameters."""

    name: str
    parameters: dict[str, Any] = dataclasses.field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "parameters": dict(self.parameters)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Strategy":
        return cls(name=data["name"], parameters=dict(data.get("parameters") or {}))


@dataclasses.dataclass(frozen=True)
class VariantPayload:
    type: str
    value: str


@dataclasses.dataclass(frozen=True)
class Variant:
    """Weighted A/B payload returned alongside an enabled toggle."""

    name: str
    weight: int = 0
    stickiness: str = "default"
    payload: VariantPayload | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "weight": self.weight,
            "stickiness": self.stickiness,
        }
        if self.payload is not None:
            data["payload"] = {"type": self.payload.type, "value": self.payload.value}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Variant":
        payload = data.get("payload")
        return cls(
            name=data["name"],
            weight=data.get("weight", 0),
            stickiness=data.get("stickiness") or "default",
            payload=VariantPayload(**payload) if payload else None,
        )


@dataclasses.dataclass(frozen=True)
class FeatureToggle:
    """A named on/off switch with strategies and optional variants."""

    name: str
    strategies: tuple[Strategy, ...] = ()
    description: str = ""
    type: str = "release"
    project: str = "default"
    enabled: bool = False
    stale: bool = False
    variants: tuple[Variant, ...] = ()
    created_at: datetime | None = None

    def copy_with(self, **changes: Any) -> "FeatureToggle":
        """Return a new instance with given fields replaced."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "project": self.project,
            "enabled": self.enabled,
            "stale": self.stale,
            "strategies": [s.to_dict() for s in self.strategies],
            "variants": [v.to_dict() for v in self.variants],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class FeatureStatus(enum.Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


@dataclasses.dataclass(frozen=True)
class FeatureQuery:
    """Filters for toggle listings.

    ``tags`` match with OR semantics; ``projects`` match exactly;
    ``name_prefix`` is a literal prefix.
    """

    name_prefix: str | None = None
    tags: tuple[Tag, ...] = ()
    projects: tuple[str, ...] = ()


__all__ = [
    "ARCHIVED_TOGGLE_EXISTS",
    "FeatureQuery",
    "FeatureStatus",
    "FeatureToggle",
    "Strategy",
    "TOGGLE_EXISTS",
    "Tag",
    "Variant",
    "VariantPayload",
]
