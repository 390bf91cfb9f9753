"""FastAPI adapter – client API router (``/api/client``).

Read-only projection polled by SDKs: active toggles with their ``enabled``
state, strategies and variants.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from togglehouse.adapters.fastapi.admin_api import API_VERSION
from togglehouse.adapters.fastapi.deps import ServiceProvider, feature_query, get_services
from togglehouse.application.toggles import FeatureQuery, FeatureToggle

_CLIENT_FIELDS = ("name", "description", "type", "project", "enabled", "stale", "strategies", "variants")


def client_view(toggle: FeatureToggle) -> dict[str, Any]:
    data = toggle.to_dict()
    return {key: data[key] for key in _CLIENT_FIELDS}


def ClientRouter(prefix: str = "/api/client") -> APIRouter:
    router = APIRouter(prefix=prefix, tags=["client"])

    @router.get("/features")
    async def list_features(
        query: FeatureQuery = Depends(feature_query),
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            toggles = await svc.toggles.get_features(query)
        return {"version": API_VERSION, "features": [client_view(t) for t in toggles]}

    @router.get("/features/{name}")
    async def get_feature(
        name: str,
        services: ServiceProvider = Depends(get_services),
    ) -> dict[str, Any]:
        async with services.scope() as svc:
            return client_view(await svc.toggles.get_feature(name))

    return router


__all__ = ["ClientRouter", "client_view"]
