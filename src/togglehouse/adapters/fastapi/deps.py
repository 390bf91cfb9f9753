"""FastAPI adapter – request-scoped services and reusable dependencies."""
from __future__ import annotations

import dataclasses
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Query, Request

from togglehouse.adapters.sqlalchemy import SqlAlchemyUnitOfWork
from togglehouse.application.toggles import (
    EventService,
    FeatureQuery,
    FeatureToggleService,
    Tag,
    TagService,
)
from togglehouse.kernel.errors import UnsupportedMediaTypeError, ValidationError
from togglehouse.kernel.time import Clock, SystemClock
from togglehouse.observability.metrics import Metrics, NoopMetrics

JSON_MEDIA_TYPE = "application/json"


@dataclasses.dataclass(frozen=True)
class Services:
    """Services bound to one unit of work."""

    toggles: FeatureToggleService
    tags: TagService
    events: EventService


class ServiceProvider:
    """Open a unit of work and build the services that run inside it.

    Usage::

        async with provider.scope() as svc:
            toggle = await svc.toggles.create_feature(definition)

    The transaction commits when the block exits cleanly and rolls back
    otherwise, before the response is rendered.
    """

    def __init__(
        self,
        session_factory: Any,
        metrics: Metrics | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._metrics = metrics or NoopMetrics()
        self._clock = clock or SystemClock()

    @asynccontextmanager
    async def scope(self) -> AsyncIterator[Services]:
        async with SqlAlchemyUnitOfWork(self._session_factory, self._metrics) as uow:
            events = EventService(uow.events, self._clock)
            yield Services(
                toggles=FeatureToggleService(uow.features, uow.tags, events, self._clock),
                tags=TagService(uow.tags, events),
                events=events,
            )


def get_services(request: Request) -> ServiceProvider:
    """Return the :class:`ServiceProvider` installed by ``create_app``."""
    return request.app.state.services


def require_json(request: Request) -> None:
    """Reject request bodies that are not ``application/json`` (charset allowed)."""
    content_type = request.headers.get("content-type")
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type != JSON_MEDIA_TYPE:
        raise UnsupportedMediaTypeError(content_type, accepted=(JSON_MEDIA_TYPE,))


def feature_query(
    tag: list[str] = Query(default=[], description="type:value; repeat for OR"),
    name_prefix: str | None = Query(default=None, alias="namePrefix"),
    project: list[str] = Query(default=[]),
) -> FeatureQuery:
    """Build a :class:`FeatureQuery` from the listing query string."""
    tags: list[Tag] = []
    for raw in tag:
        try:
            tags.append(Tag.parse(raw))
        except ValueError as exc:
            raise ValidationError(
                '"tag" must be in the format type:value',
                errors=[{"message": '"tag" must be in the format type:value', "path": ["tag"]}],
                cause=exc,
            ) from exc
    return FeatureQuery(
        name_prefix=name_prefix or None,
        tags=tuple(tags),
        projects=tuple(project),
    )


__all__ = [
    "JSON_MEDIA_TYPE",
    "ServiceProvider",
    "Services",
    "feature_query",
    "get_services",
    "require_json",
]
