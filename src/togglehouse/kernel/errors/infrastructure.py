"""Infrastructure errors: database and I/O failures."""

from __future__ import annotations

from typing import Any

from togglehouse.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class StoreUnavailableError(InfrastructureError):
    """A store could not reach or use its backing database."""

    default_code = "store_unavailable"

    def __init__(
        self,
        store: str,
        action: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Store '{store}' failed during '{action}'", **kwargs)
        self.store = store
        self.action = action


__all__ = ["InfrastructureError", "StoreUnavailableError"]
