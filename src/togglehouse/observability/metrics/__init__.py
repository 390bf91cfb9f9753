"""Observability – metrics ports, no-op backend and store timer."""
from togglehouse.observability.metrics.noop import NoopMetrics
from togglehouse.observability.metrics.ports import Counter, Histogram, Metrics
from togglehouse.observability.metrics.timer import DB_TIME, StoreTimer

__all__ = ["Counter", "DB_TIME", "Histogram", "Metrics", "NoopMetrics", "StoreTimer"]
