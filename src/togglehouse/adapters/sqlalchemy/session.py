"""SQLAlchemy adapter – SqlAlchemySessionFactory."""
from __future__ import annotations

from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from togglehouse.adapters.sqlalchemy.models import Base


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SqlAlchemySessionFactory:
    """Creates async SQLAlchemy sessions from an engine URL.

    SQLite connections get ``PRAGMA foreign_keys=ON`` so tag links cascade
    the same way they do on PostgreSQL.
    """

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        self._engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        if self._engine.dialect.name == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def __call__(self) -> AsyncSession:
        return self._session_factory()

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Readiness check: ``True`` when ``SELECT 1`` succeeds."""
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["SqlAlchemySessionFactory"]
