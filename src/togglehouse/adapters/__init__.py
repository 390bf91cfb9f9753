"""Adapters – SQLAlchemy persistence and the FastAPI HTTP surface."""
