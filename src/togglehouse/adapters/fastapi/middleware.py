"""FastAPI adapter – ASGI middleware implementations.

FastAPICorrelationIdMiddleware
FastAPIMetricsMiddleware
"""
from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

from togglehouse.observability.correlation import CorrelationContext, RequestContext
from togglehouse.observability.metrics import Metrics

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send


# ---------------------------------------------------------------------------
# Correlation-ID middleware
# ---------------------------------------------------------------------------

class FastAPICorrelationIdMiddleware:
    """Extract correlation ID from request headers, propagate to response.

    Header resolution order:
    1. ``X-Correlation-ID``
    2. ``X-Request-ID``
    3. ``traceparent`` (W3C trace-context, extracts trace-id segment)
    4. Generated UUID v4
    """

    def __init__(
        self,
        app: "ASGIApp",
        header_name: str = "X-Correlation-ID",
        fallback_headers: tuple[str, ...] = ("X-Request-ID", "traceparent"),
    ) -> None:
        self.app = app
        self._response_header = header_name.lower().encode()
        self._request_headers: list[bytes] = [
            header_name.lower().encode(),
            *[h.lower().encode() for h in fallback_headers],
        ]

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))

        correlation_id: str | None = None
        for header in self._request_headers:
            value = headers.get(header, b"").decode().strip()
            if value:
                # W3C traceparent: 00-<trace-id>-<span-id>-<flags>
                if header == b"traceparent" and "-" in value:
                    parts = value.split("-")
                    if len(parts) >= 2:
                        correlation_id = parts[1]
                else:
                    correlation_id = value
                break

        correlation_id = correlation_id or str(uuid4())
        CorrelationContext.set(RequestContext(correlation_id=correlation_id))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        response_header = self._response_header
        encoded_id = correlation_id.encode()

        async def send_with_header(message: Any) -> None:
            if message["type"] == "http.response.start":
                headers_list: list[tuple[bytes, bytes]] = list(message.get("headers", []))
                headers_list.append((response_header, encoded_id))
                message = {**message, "headers": headers_list}
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            CorrelationContext.clear()


# ---------------------------------------------------------------------------
# Metrics middleware
# ---------------------------------------------------------------------------

class FastAPIMetricsMiddleware:
    """Record per-route request counts and latency histograms."""

    def __init__(self, app: "ASGIApp", metrics: Metrics) -> None:
        self.app = app
        self._requests = metrics.counter("http.requests", "Total HTTP requests")
        self._latency = metrics.histogram("http.latency_ms", "HTTP request latency", "ms")
        self._errors = metrics.counter("http.errors", "HTTP 5xx responses")

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        labels: dict[str, str] = {
            "method": scope.get("method", "GET"),
            "path": scope.get("path", ""),
        }
        start = time.perf_counter()
        status_code: list[int] = [500]

        async def send_capturing(message: Any) -> None:
            if message["type"] == "http.response.start":
                status_code[0] = message.get("status", 200)
            await send(message)

        try:
            await self.app(scope, receive, send_capturing)
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            self._requests.add(1.0, {**labels, "status": str(status_code[0])})
            self._latency.record(elapsed, labels)
            if status_code[0] >= 500:
                self._errors.add(1.0, labels)


__all__ = ["FastAPICorrelationIdMiddleware", "FastAPIMetricsMiddleware"]
