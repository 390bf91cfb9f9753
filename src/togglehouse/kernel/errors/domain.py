"""Domain errors: toggle/tag rule violations."""

from __future__ import annotations

from typing import Any

from togglehouse.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a toggle or tag rule is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of item-level failures, each at least
    ``{"message": ...}`` and optionally ``{"path": [...]}``.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or [{"message": message}]

    @property
    def details(self) -> list[dict[str, Any]]:
        return self.errors


class NotFoundError(DomainError):
    """The requested toggle or tag does not exist."""

    default_code = "not_found"

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
        identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """The operation conflicts with existing state (duplicate name or key)."""

    default_code = "conflict"


__all__ = [
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
