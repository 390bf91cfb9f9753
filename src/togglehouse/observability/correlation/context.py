"""Observability – RequestContext, CorrelationContext."""
from __future__ import annotations

import dataclasses
from contextvars import ContextVar
from uuid import uuid4


@dataclasses.dataclass(frozen=True)
class RequestContext:
    """Ambient context for a single HTTP request."""
    correlation_id: str

    @classmethod
    def new(cls) -> "RequestContext":
        return cls(correlation_id=str(uuid4()))


_CTX_VAR: ContextVar[RequestContext | None] = ContextVar("_togglehouse_request_ctx", default=None)


class CorrelationContext:
    """Ambient correlation context stored in a ``ContextVar``."""

    @staticmethod
    def set(ctx: RequestContext) -> None:
        _CTX_VAR.set(ctx)

    @staticmethod
    def get() -> RequestContext | None:
        return _CTX_VAR.get()

    @staticmethod
    def clear() -> None:
        _CTX_VAR.set(None)


__all__ = ["CorrelationContext", "RequestContext"]
