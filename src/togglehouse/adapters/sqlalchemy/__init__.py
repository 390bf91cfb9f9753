"""SQLAlchemy adapter – session factory, unit of work and the three stores."""
from togglehouse.adapters.sqlalchemy.event_store import SqlAlchemyEventStore
from togglehouse.adapters.sqlalchemy.feature_toggle_store import SqlAlchemyFeatureToggleStore
from togglehouse.adapters.sqlalchemy.models import Base, EventRow, FeatureRow, FeatureTagRow, TagRow
from togglehouse.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from togglehouse.adapters.sqlalchemy.tag_store import SqlAlchemyTagStore
from togglehouse.adapters.sqlalchemy.uow import SqlAlchemyUnitOfWork

__all__ = [
    "Base",
    "EventRow",
    "FeatureRow",
    "FeatureTagRow",
    "SqlAlchemyEventStore",
    "SqlAlchemyFeatureToggleStore",
    "SqlAlchemySessionFactory",
    "SqlAlchemyTagStore",
    "SqlAlchemyUnitOfWork",
    "TagRow",
]
