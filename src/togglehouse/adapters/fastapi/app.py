"""FastAPI adapter – application factory."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI

import togglehouse
from togglehouse.adapters.fastapi.admin_api import AdminRouter
from togglehouse.adapters.fastapi.client_api import ClientRouter
from togglehouse.adapters.fastapi.deps import ServiceProvider
from togglehouse.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from togglehouse.adapters.fastapi.middleware import (
    FastAPICorrelationIdMiddleware,
    FastAPIMetricsMiddleware,
)
from togglehouse.adapters.fastapi.routers import FastAPIHealthRouter
from togglehouse.adapters.sqlalchemy import SqlAlchemySessionFactory
from togglehouse.config import DotenvSettingsLoader, ServerSettings
from togglehouse.kernel.time import Clock
from togglehouse.observability.logging import JsonLoggerFactory, get_logger
from togglehouse.observability.metrics import Metrics, NoopMetrics

logger = get_logger(__name__)


def create_app(
    settings: ServerSettings | None = None,
    session_factory: SqlAlchemySessionFactory | None = None,
    metrics: Metrics | None = None,
    clock: Clock | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Build the toggle server.

    Parameters
    ----------
    settings:
        Server configuration; defaults to ``ServerSettings()``.
    session_factory:
        Pre-built session factory (tests pass one bound to a temporary
        database); otherwise one is created from ``settings.database_url``.
    metrics:
        Metrics backend for ``db.time`` and ``http.*`` instruments.
    clock:
        Time source for ``createdAt`` and event timestamps.
    configure_logging:
        When ``True`` structlog is configured from ``settings``.
    """
    settings = settings or ServerSettings()
    metrics = metrics or NoopMetrics()
    if session_factory is None:
        session_factory = SqlAlchemySessionFactory(
            settings.database_url, echo=settings.database_echo
        )
    if configure_logging:
        JsonLoggerFactory.configure(settings.log_level, json=settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # noqa: ARG001
        if settings.create_schema:
            await session_factory.create_schema()
        logger.info("togglehouse started", version=togglehouse.__version__)
        try:
            yield
        finally:
            await session_factory.dispose()
            logger.info("togglehouse stopped")

    app = FastAPI(title="togglehouse", version=togglehouse.__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.services = ServiceProvider(session_factory, metrics, clock)

    FastAPIExceptionMapper().register(app)
    app.add_middleware(FastAPIMetricsMiddleware, metrics=metrics)
    app.add_middleware(FastAPICorrelationIdMiddleware)

    app.include_router(FastAPIHealthRouter(readiness_checks=[session_factory.ping]))
    app.include_router(AdminRouter())
    app.include_router(ClientRouter())
    return app


def app_from_env(**kwargs: Any) -> FastAPI:
    """Factory for ``uvicorn --factory togglehouse.adapters.fastapi.app:app_from_env``."""
    return create_app(DotenvSettingsLoader().load(ServerSettings), **kwargs)


__all__ = ["app_from_env", "create_app"]
