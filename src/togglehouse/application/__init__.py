"""Application layer – toggle and tag use cases."""
