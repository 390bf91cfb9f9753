"""FastAPI adapter – app factory, routers, middleware, exception mapper, deps."""
from togglehouse.adapters.fastapi.admin_api import AdminRouter
from togglehouse.adapters.fastapi.app import app_from_env, create_app
from togglehouse.adapters.fastapi.client_api import ClientRouter
from togglehouse.adapters.fastapi.deps import ServiceProvider, Services, feature_query, require_json
from togglehouse.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from togglehouse.adapters.fastapi.middleware import (
    FastAPICorrelationIdMiddleware,
    FastAPIMetricsMiddleware,
)
from togglehouse.adapters.fastapi.routers import FastAPIHealthRouter

__all__ = [
    "AdminRouter",
    "ClientRouter",
    "FastAPICorrelationIdMiddleware",
    "FastAPIExceptionMapper",
    "FastAPIHealthRouter",
    "FastAPIMetricsMiddleware",
    "ServiceProvider",
    "Services",
    "app_from_env",
    "create_app",
    "feature_query",
    "require_json",
]
