"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

from typing import Any, Callable

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from togglehouse.kernel.errors import (
    BaseError,
    ConflictError,
    InfrastructureError,
    NotFoundError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from togglehouse.observability.correlation import CorrelationContext
from togglehouse.observability.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _correlation_id() -> str | None:
    ctx = CorrelationContext.get()
    return ctx.correlation_id if ctx is not None else None


def _request_validation_details(exc: RequestValidationError) -> list[dict[str, Any]]:
    details: list[dict[str, Any]] = []
    for err in exc.errors():
        path = [p for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = path[-1] if path else "value"
        details.append({"message": f'"{field}" {err.get("msg", "is invalid")}', "path": path})
    return details or [{"message": "Invalid request"}]


class FastAPIExceptionMapper:
    """Register togglehouse error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"code": "conflict", "message": "...", "details": [{"message": "..."}],
         "correlation_id": "..."}

    Mappings
    --------
    ``ValidationError``            → 400
    ``RequestValidationError``     → 400 (folded into the same body shape)
    ``NotFoundError``              → 404
    ``ConflictError``              → 409
    ``UnsupportedMediaTypeError``  → 415
    ``InfrastructureError``        → 500 (generic message, cause is logged)
    """

    def __init__(self) -> None:
        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (ValidationError, 400),
            (NotFoundError, 404),
            (ConflictError, 409),
            (UnsupportedMediaTypeError, 415),
            (InfrastructureError, 500),
        ]

    def status_for(self, exc: BaseException) -> int:
        for exc_type, status in self._map:
            if isinstance(exc, exc_type):
                return status
        return 500

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""
        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, self._make_handler(status))
        app.add_exception_handler(RequestValidationError, self._request_validation_handler)

    def _make_handler(self, status: int) -> Callable[[Any, Any], Any]:
        def handler(request: Any, exc: Any) -> Any:
            if status >= 500:
                logger.error(
                    "request failed",
                    method=request.method,
                    path=request.url.path,
                    error=exc.code,
                    exc_info=exc,
                )
                body: dict[str, Any] = {
                    "code": exc.code,
                    "message": INTERNAL_ERROR_MESSAGE,
                    "details": [{"message": INTERNAL_ERROR_MESSAGE}],
                }
            elif isinstance(exc, BaseError):
                body = exc.to_dict()
            else:
                body = {"code": "error", "message": str(exc), "details": [{"message": str(exc)}]}

            body["correlation_id"] = _correlation_id()
            return JSONResponse(status_code=status, content=body)

        return handler

    def _request_validation_handler(self, request: Any, exc: RequestValidationError) -> Any:  # noqa: ARG002
        details = _request_validation_details(exc)
        body = {
            "code": ValidationError.default_code,
            "message": details[0]["message"],
            "details": details,
            "correlation_id": _correlation_id(),
        }
        return JSONResponse(status_code=400, content=body)


__all__ = ["FastAPIExceptionMapper", "INTERNAL_ERROR_MESSAGE"]
