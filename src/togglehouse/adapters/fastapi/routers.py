"""FastAPI adapter – health router."""
from __future__ import annotations

from typing import Any, Awaitable, Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from togglehouse.observability.logging import get_logger

logger = get_logger(__name__)

ReadinessCheck = Callable[[], Awaitable[bool]]


def FastAPIHealthRouter(
    path: str = "/health",
    readiness_checks: list[ReadinessCheck] | None = None,
    tags: list[str] | None = None,
) -> APIRouter:
    """Return a liveness + readiness health-check router.

    Parameters
    ----------
    path:
        Base path prefix.  Liveness is at ``{path}/live``, readiness at
        ``{path}/ready``.
    readiness_checks:
        Optional list of async callables returning ``bool``.  All checks
        must return ``True`` for the readiness endpoint to return 200;
        otherwise it returns 503.
    tags:
        OpenAPI tags for the generated routes.
    """
    router = APIRouter(tags=tags or ["ops"])
    checks = readiness_checks or []

    @router.get(f"{path}/live")
    async def liveness() -> dict[str, str]:
        """Liveness probe – always 200 OK when the process is up."""
        return {"status": "ok"}

    @router.get(f"{path}/ready")
    async def readiness() -> Any:
        """Readiness probe – runs all registered readiness checks."""
        results: dict[str, bool] = {}
        all_ok = True
        for check in checks:
            name = getattr(check, "__name__", repr(check))
            try:
                ok = await check()
            except Exception as exc:  # noqa: BLE001
                logger.warning("readiness check failed", check=name, error=str(exc))
                ok = False
            results[name] = ok
            if not ok:
                all_ok = False

        status_code = 200 if all_ok else 503
        return JSONResponse(
            status_code=status_code,
            content={"status": "ok" if all_ok else "degraded", "checks": results},
        )

    return router


__all__ = ["FastAPIHealthRouter", "ReadinessCheck"]
