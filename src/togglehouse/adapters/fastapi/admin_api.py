"""FastAPI adapter – admin API router (``/api/admin``).

Every write goes through a service inside one unit of work, so the row
change and the event it emits commit together.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Response

from togglehouse.adapters.fastapi.deps import (
    ServiceProvider,
    feature_query,
    get_services,
    require_json,
)
from togglehouse.adapters.fastapi.schemas import FeatureToggleIn, NameIn, TagImportIn, TagIn
from togglehouse.application.toggles import FeatureQuery, Tag

API_VERSION = 1

_json_body = [Depends(require_json)]


def _features(toggles: list[Any]) -> dict[str, Any]:
    return {"version": API_VERSION, "features": [t.to_dict() for t in toggles]}


def _tags(tags: list[Tag]) -> dict[str, Any]:
    return {"version": API_VERSION, "tags": [t.to_dict() for t in tags]}


def AdminRouter(prefix: str = "/api/admin") -> APIRouter:
    """Return the admin router: toggles, archive, tags and events."""
    router = APIRouter(prefix=prefix, tags=["admin"])

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    @router.get("/features")
    async def list_features(
        query: FeatureQuery = Depends(feature_query),
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return _features(await svc.toggles.get_features(query))

    @router.post("/features/validate", dependencies=_json_body)
    async def validate_feature_name(
        body: NameIn,
        services: ServiceProvider = Depends(get_services),
    ) -> Response:
        async with services.scope() as svc:
            await svc.toggles.validate_name(body.name)
        return Response(status_code=200)

    @router.get("/features/{name}")
    async def get_feature(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.get_feature(name)).to_dict()

    @router.post("/features", status_code=201, dependencies=_json_body)
    async def create_feature(
        body: FeatureToggleIn,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.create_feature(body.to_domain())).to_dict()

    @router.put("/features/{name}", dependencies=_json_body)
    async def update_feature(
        name: str,
        body: FeatureToggleIn,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.update_feature(name, body.to_domain())).to_dict()

    @router.delete("/features/{name}")
    async def archive_feature(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> Response:
        async with services.scope() as svc:
            await svc.toggles.archive(name)
        return Response(status_code=200)

    @router.post("/features/{name}/toggle")
    async def flip_feature(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.toggle(name)).to_dict()

    @router.post("/features/{name}/toggle/on")
    async def enable_feature(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.toggle(name, True)).to_dict()

    @router.post("/features/{name}/toggle/off")
    async def disable_feature(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.toggle(name, False)).to_dict()

    @router.post("/features/{name}/stale/on")
    async def mark_stale(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.set_stale(name, True)).to_dict()

    @router.post("/features/{name}/stale/off")
    async def unmark_stale(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.set_stale(name, False)).to_dict()

    # ------------------------------------------------------------------
    # Feature tags
    # ------------------------------------------------------------------

    @router.get("/features/{name}/tags")
    async def list_feature_tags(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return _tags(await svc.toggles.get_tags_for_feature(name))

    @router.post("/features/{name}/tags", status_code=201, dependencies=_json_body)
    async def tag_feature(
        name: str,
        body: TagIn,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.toggles.tag_feature(name, body.to_domain())).to_dict()

    @router.delete("/features/{name}/tags/{tag_type}/{value}")
    async def untag_feature(
        name: str,
        tag_type: str,
        value: str,
        services: ServiceProvider = Depends(get_services),
    ) -> Response:
        async with services.scope() as svc:
            await svc.toggles.untag_feature(name, Tag(tag_type, value))
        return Response(status_code=200)

    # ------------------------------------------------------------------
    # Archive
    # ------------------------------------------------------------------

    @router.get("/archive/features")
    async def list_archived(
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return _features(await svc.toggles.get_archived_features())

    @router.post("/archive/revive/{name}")
    async def revive_feature(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> Response:
        async with services.scope() as svc:
            await svc.toggles.revive(name)
        return Response(status_code=200)

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    @router.get("/tags")
    async def list_tags(
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return _tags(await svc.tags.get_tags())

    @router.post("/tags", status_code=201, dependencies=_json_body)
    async def create_tag(
        body: TagIn,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return (await svc.tags.create_tag(body.to_domain())).to_dict()

    @router.post("/tags/import", dependencies=_json_body)
    async def import_tags(
        body: TagImportIn,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return _tags(await svc.tags.import_tags([t.to_domain() for t in body.tags]))

    @router.get("/tags/{tag_type}")
    async def list_tags_by_type(
        tag_type: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return _tags(await svc.tags.get_tags_by_type(tag_type))

    @router.get("/tags/{tag_type}/{value}")
    async def get_tag(
        tag_type: str,
        value: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            tag = await svc.tags.get_tag(tag_type, value)
        return {"version": API_VERSION, "tag": tag.to_dict()}

    @router.delete("/tags/{tag_type}/{value}")
    async def delete_tag(
        tag_type: str,
        value: str,
        services: ServiceProvider = Depends(get_services),
    ) -> Response:
        async with services.scope() as svc:
            await svc.tags.delete_tag(Tag(tag_type, value))
        return Response(status_code=200)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @router.get("/events")
    async def list_events(
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            events = await svc.events.get_events()
        return {"version": API_VERSION, "events": [e.to_dict() for e in events]}

    @router.get("/events/{name}")
    async def list_feature_events(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            events = await svc.events.get_events_for_feature(name)
        return {
            "version": API_VERSION,
            "toggleName": name,
            "events": [e.to_dict() for e in events],
        }

    return router


__all__ = ["API_VERSION", "AdminRouter"]
