"""Unit tests for the FastAPI adapter building blocks."""
from __future__ import annotations

from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from togglehouse.adapters.fastapi import (
    FastAPICorrelationIdMiddleware,
    FastAPIExceptionMapper,
    FastAPIHealthRouter,
    FastAPIMetricsMiddleware,
    create_app,
    require_json,
)
from togglehouse.config import ServerSettings
from togglehouse.kernel.errors import (
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from togglehouse.observability.correlation import CorrelationContext
from togglehouse.testing.fakes import FakeMetricsRegistry


# ---------------------------------------------------------------------------
# FastAPICorrelationIdMiddleware
# ---------------------------------------------------------------------------


class TestFastAPICorrelationIdMiddleware:
    def _app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(FastAPICorrelationIdMiddleware)

        @app.get("/ping")
        async def ping() -> dict[str, str]:
            return {"pong": "true"}

        return app

    def test_generated_correlation_id_returned_in_header(self) -> None:
        resp = TestClient(self._app()).get("/ping")
        assert resp.status_code == 200
        assert "x-correlation-id" in resp.headers

    def test_client_supplied_id_echoed_back(self) -> None:
        resp = TestClient(self._app()).get("/ping", headers={"X-Correlation-ID": "my-req-123"})
        assert resp.headers["x-correlation-id"] == "my-req-123"

    def test_fallback_to_x_request_id(self) -> None:
        resp = TestClient(self._app()).get("/ping", headers={"X-Request-ID": "req-fallback"})
        assert resp.headers["x-correlation-id"] == "req-fallback"

    def test_traceparent_extraction(self) -> None:
        traceparent = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"
        resp = TestClient(self._app()).get("/ping", headers={"traceparent": traceparent})
        assert resp.headers["x-correlation-id"] == "4bf92f3577b34da6a3ce929d0e0e4736"

    def test_correlation_id_set_in_context(self) -> None:
        app = FastAPI()
        app.add_middleware(FastAPICorrelationIdMiddleware)
        captured: list[str] = []

        @app.get("/capture")
        async def capture() -> dict[str, str]:
            ctx = CorrelationContext.get()
            if ctx:
                captured.append(ctx.correlation_id)
            return {"ok": "1"}

        TestClient(app).get("/capture", headers={"X-Correlation-ID": "ctx-id-test"})
        assert captured == ["ctx-id-test"]


# ---------------------------------------------------------------------------
# FastAPIExceptionMapper
# ---------------------------------------------------------------------------


class TestFastAPIExceptionMapper:
    def _app(self, exc: Exception) -> FastAPI:
        app = FastAPI()
        FastAPIExceptionMapper().register(app)
        app.add_middleware(FastAPICorrelationIdMiddleware)

        @app.get("/boom")
        async def boom() -> None:
            raise exc

        return app

    def _get(self, exc: Exception):
        return TestClient(self._app(exc)).get("/boom", headers={"X-Correlation-ID": "cid-1"})

    def test_validation_error_is_400_with_details(self) -> None:
        resp = self._get(ValidationError('"name" must be URL friendly'))
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "validation_error"
        assert body["details"] == [{"message": '"name" must be URL friendly'}]
        assert body["correlation_id"] == "cid-1"

    def test_not_found_is_404(self) -> None:
        assert self._get(NotFoundError("missing")).status_code == 404

    def test_conflict_is_409_with_details(self) -> None:
        resp = self._get(ConflictError("A toggle with that name already exists"))
        assert resp.status_code == 409
        assert resp.json()["details"][0]["message"] == "A toggle with that name already exists"

    def test_unsupported_media_type_is_415(self) -> None:
        assert self._get(UnsupportedMediaTypeError("text/plain")).status_code == 415

    def test_store_failure_is_500_with_generic_message(self) -> None:
        resp = self._get(StoreUnavailableError("tag", "getAll", "connection refused on 10.0.0.3"))
        assert resp.status_code == 500
        body = resp.json()
        assert body["message"] == "Internal server error"
        assert "10.0.0.3" not in resp.text

    def test_status_for(self) -> None:
        mapper = FastAPIExceptionMapper()
        assert mapper.status_for(ValidationError("x")) == 400
        assert mapper.status_for(RuntimeError("x")) == 500


# ---------------------------------------------------------------------------
# require_json
# ---------------------------------------------------------------------------


class TestRequireJson:
    def _client(self) -> TestClient:
        app = FastAPI()
        FastAPIExceptionMapper().register(app)

        @app.post("/echo", dependencies=[Depends(require_json)])
        async def echo() -> dict[str, str]:
            return {"ok": "1"}

        return TestClient(app)

    def test_json_accepted(self) -> None:
        assert self._client().post("/echo", json={}).status_code == 200

    def test_json_with_parameters_accepted(self) -> None:
        resp = self._client().post(
            "/echo", content="{}", headers={"Content-Type": "Application/JSON; charset=utf-8"}
        )
        assert resp.status_code == 200

    def test_other_types_rejected(self) -> None:
        assert self._client().post("/echo", content="x", headers={"Content-Type": "text/plain"}).status_code == 415

    def test_missing_content_type_rejected(self) -> None:
        assert self._client().post("/echo").status_code == 415


# ---------------------------------------------------------------------------
# FastAPIMetricsMiddleware
# ---------------------------------------------------------------------------


class TestFastAPIMetricsMiddleware:
    def test_records_requests_latency_and_errors(self) -> None:
        metrics = FakeMetricsRegistry()
        app = FastAPI()
        FastAPIExceptionMapper().register(app)
        app.add_middleware(FastAPIMetricsMiddleware, metrics=metrics)

        @app.get("/ok")
        async def ok() -> dict[str, str]:
            return {"ok": "1"}

        @app.get("/fail")
        async def fail() -> None:
            raise StoreUnavailableError("tag", "getAll")

        client = TestClient(app)
        client.get("/ok")
        client.get("/fail")

        metrics.assert_counter_incremented("http.requests", 2)
        metrics.assert_counter_incremented("http.errors", 1)
        assert metrics.histogram("http.latency_ms").call_count == 2
        statuses = [labels["status"] for _, labels in metrics.counter("http.requests").calls]
        assert statuses == ["200", "500"]


# ---------------------------------------------------------------------------
# FastAPIHealthRouter
# ---------------------------------------------------------------------------


class TestFastAPIHealthRouter:
    def test_live(self) -> None:
        app = FastAPI()
        app.include_router(FastAPIHealthRouter())
        assert TestClient(app).get("/health/live").json() == {"status": "ok"}

    def test_ready_with_failing_check(self) -> None:
        async def database() -> bool:
            raise ConnectionError("down")

        app = FastAPI()
        app.include_router(FastAPIHealthRouter(readiness_checks=[database]))
        resp = TestClient(app).get("/health/ready")
        assert resp.status_code == 503
        assert resp.json() == {"status": "degraded", "checks": {"database": False}}

    def test_app_readiness_pings_database(self, tmp_path: Path) -> None:
        settings = ServerSettings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'h.db'}")
        with TestClient(create_app(settings, configure_logging=False)) as client:
            resp = client.get("/health/ready")
        assert resp.status_code == 200
        assert resp.json()["checks"] == {"ping": True}

    def test_app_readiness_when_database_down(self, tmp_path: Path) -> None:
        settings = ServerSettings(
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'no' / 'such' / 'h.db'}",
            create_schema=False,
        )
        with TestClient(create_app(settings, configure_logging=False)) as client:
            assert client.get("/health/ready").status_code == 503


# ---------------------------------------------------------------------------
# create_app
# ---------------------------------------------------------------------------


class TestCreateApp:
    def test_store_timings_flow_into_metrics(self, tmp_path: Path) -> None:
        metrics = FakeMetricsRegistry()
        settings = ServerSettings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'm.db'}")
        with TestClient(create_app(settings, metrics=metrics, configure_logging=False)) as client:
            client.get("/api/admin/features")
        assert {"store": "feature-toggle", "action": "getAll"} in metrics.histogram("db.time").labels_seen()
        metrics.assert_counter_incremented("http.requests", 1)

    def test_error_body_carries_correlation_id(self, tmp_path: Path) -> None:
        settings = ServerSettings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'c.db'}")
        with TestClient(create_app(settings, configure_logging=False)) as client:
            resp = client.get("/api/admin/features/ghost", headers={"X-Correlation-ID": "abc"})
        assert resp.status_code == 404
        assert resp.json()["correlation_id"] == "abc"
        assert resp.headers["x-correlation-id"] == "abc"
