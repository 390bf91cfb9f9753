"""Observability – StoreTimer: database-call latency per store action."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from togglehouse.observability.metrics.ports import Metrics

DB_TIME = "db.time"


class StoreTimer:
    """Record the wall time of each store action into the ``db.time`` histogram.

    Usage::

        timer = StoreTimer(metrics, "tag")
        with timer("getAll"):
            rows = await session.execute(stmt)
    """

    def __init__(self, metrics: Metrics, store: str) -> None:
        self._histogram = metrics.histogram(DB_TIME, "Database call latency", "ms")
        self._store = store

    @contextmanager
    def __call__(self, action: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            self._histogram.record(elapsed, {"store": self._store, "action": action})


__all__ = ["DB_TIME", "StoreTimer"]
