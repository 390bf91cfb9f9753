"""Observability – correlation context."""
from togglehouse.observability.correlation.context import CorrelationContext, RequestContext

__all__ = ["CorrelationContext", "RequestContext"]
