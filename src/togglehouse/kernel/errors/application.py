"""Application-layer errors: transport concerns at use-case level."""

from __future__ import annotations

from typing import Any

from togglehouse.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnsupportedMediaTypeError(ApplicationError):
    """Request body was sent with a content type the endpoint does not accept."""

    default_code = "unsupported_media_type"

    def __init__(
        self,
        content_type: str | None,
        *,
        accepted: tuple[str, ...] = ("application/json",),
        **kwargs: Any,
    ) -> None:
        shown = content_type or "none"
        super().__init__(
            f"Unsupported content-type '{shown}', expected one of: {', '.join(accepted)}",
            **kwargs,
        )
        self.content_type = content_type
        self.accepted = accepted


__all__ = ["ApplicationError", "UnsupportedMediaTypeError"]
