"""Observability – structured logging helpers."""
from togglehouse.observability.logging.factory import JsonLoggerFactory
from togglehouse.observability.logging.processors import CorrelationProcessor, get_logger

__all__ = ["CorrelationProcessor", "JsonLoggerFactory", "get_logger"]
