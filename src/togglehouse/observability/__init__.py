"""Observability – logging, correlation and metrics."""
