"""FastAPI adapter – request bodies.

Shape checks only; the toggle rules (URL-friendly names, strategy count,
unique variants) live in :mod:`togglehouse.application.toggles.validation`
so they produce the same messages whether the caller is HTTP or Python.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from togglehouse.application.toggles import FeatureToggle, Strategy, Tag, Variant, VariantPayload


class StrategyIn(BaseModel):
    name: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)


class VariantPayloadIn(BaseModel):
    type: str
    value: str


class VariantIn(BaseModel):
    name: str = ""
    weight: int = 0
    stickiness: str | None = "default"
    payload: VariantPayloadIn | None = None


class FeatureToggleIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    description: str | None = ""
    type: str | None = "release"
    project: str | None = "default"
    enabled: bool = False
    stale: bool = False
    strategies: list[StrategyIn] = Field(default_factory=list)
    variants: list[VariantIn] | None = None

    def to_domain(self) -> FeatureToggle:
        return FeatureToggle(
            name=self.name,
            description=self.description or "",
            type=self.type or "release",
            project=self.project or "default",
            enabled=self.enabled,
            stale=self.stale,
            strategies=tuple(Strategy(s.name, dict(s.parameters)) for s in self.strategies),
            variants=tuple(
                Variant(
                    name=v.name,
                    weight=v.weight,
                    stickiness=v.stickiness or "default",
                    payload=VariantPayload(v.payload.type, v.payload.value) if v.payload else None,
                )
                for v in self.variants or ()
            ),
        )


class TagIn(BaseModel):
    type: str
    value: str

    def to_domain(self) -> Tag:
        return Tag(type=self.type.strip(), value=self.value.strip())


class TagImportIn(BaseModel):
    tags: list[TagIn]


class NameIn(BaseModel):
    name: str = ""


__all__ = [
    "FeatureToggleIn",
    "NameIn",
    "StrategyIn",
    "TagImportIn",
    "TagIn",
    "VariantIn",
    "VariantPayloadIn",
]
