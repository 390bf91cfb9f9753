"""SQLAlchemy adapter – database error translation and per-action timing."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from togglehouse.kernel.errors import ConflictError, StoreUnavailableError
from togglehouse.observability.logging import get_logger
from togglehouse.observability.metrics import Metrics, NoopMetrics, StoreTimer

logger = get_logger(__name__)


@contextmanager
def translate_db_errors(
    store: str,
    action: str,
    conflict_message: str | None = None,
) -> Iterator[None]:
    """Map driver failures onto the kernel error hierarchy.

    ``IntegrityError`` becomes :class:`ConflictError`; any other SQLAlchemy
    or socket failure becomes :class:`StoreUnavailableError`.
    """
    try:
        yield
    except IntegrityError as exc:
        raise ConflictError(
            conflict_message or f"Conflicting write in store '{store}'",
            detail={"store": store, "action": action},
            cause=exc,
        ) from exc
    except (SQLAlchemyError, OSError) as exc:
        logger.error("database failure", store=store, action=action, exc_info=exc)
        raise StoreUnavailableError(store, action, cause=exc) from exc


class SqlAlchemyStoreBase:
    """Shared session handling for the SQLAlchemy stores."""

    STORE = "store"

    def __init__(self, session: Any, metrics: Metrics | None = None) -> None:
        self._session = session
        self._timer = StoreTimer(metrics or NoopMetrics(), self.STORE)

    @contextmanager
    def _action(self, action: str, conflict_message: str | None = None) -> Iterator[None]:
        with self._timer(action), translate_db_errors(self.STORE, action, conflict_message):
            yield


__all__ = ["SqlAlchemyStoreBase", "translate_db_errors"]
