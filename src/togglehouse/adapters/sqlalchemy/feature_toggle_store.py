"""SQLAlchemy adapter – SqlAlchemyFeatureToggleStore."""
from __future__ import annotations

from typing import Any

from sqlalchemy import and_, delete, insert, or_, select, update

from togglehouse.adapters.sqlalchemy.errors import SqlAlchemyStoreBase
from togglehouse.adapters.sqlalchemy.models import FeatureRow, FeatureTagRow
from togglehouse.application.toggles.models import (
    TOGGLE_EXISTS,
    FeatureQuery,
    FeatureStatus,
    FeatureToggle,
    Strategy,
    Tag,
    Variant,
)
from togglehouse.application.toggles.ports import FeatureToggleStore
from togglehouse.kernel.errors import NotFoundError
from togglehouse.kernel.time import utc_now


class SqlAlchemyFeatureToggleStore(SqlAlchemyStoreBase, FeatureToggleStore):
    """Toggles live in one table; archiving sets ``archived_at``.

    Listings are returned in insertion order (``features.id``).
    """

    STORE = "feature-toggle"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_features(self, query: FeatureQuery | None = None) -> list[FeatureToggle]:
        query = query or FeatureQuery()
        stmt = select(FeatureRow).where(FeatureRow.active_filter())
        if query.name_prefix:
            stmt = stmt.where(FeatureRow.name.startswith(query.name_prefix, autoescape=True))
        if query.projects:
            stmt = stmt.where(FeatureRow.project.in_(query.projects))
        if query.tags:
            tagged = select(FeatureTagRow.feature_name).where(
                or_(
                    *[
                        and_(FeatureTagRow.tag_type == t.type, FeatureTagRow.tag_value == t.value)
                        for t in query.tags
                    ]
                )
            )
            stmt = stmt.where(FeatureRow.name.in_(tagged))

        with self._action("getAll"):
            result = await self._session.execute(stmt.order_by(FeatureRow.id))
            return [self._row_to_toggle(row) for row in result.scalars().all()]

    async def get_feature(self, name: str) -> FeatureToggle:
        with self._action("getFeature"):
            result = await self._session.execute(
                select(FeatureRow).where(FeatureRow.name == name, FeatureRow.active_filter())
            )
            row = result.scalars().first()
        if row is None:
            raise NotFoundError(
                f"Could not find feature toggle with name {name}",
                resource="feature",
                identifier=name,
            )
        return self._row_to_toggle(row)

    async def has_feature(self, name: str) -> FeatureStatus | None:
        with self._action("hasFeature"):
            result = await self._session.execute(
                select(FeatureRow.archived_at).where(FeatureRow.name == name)
            )
            row = result.first()
        if row is None:
            return None
        return FeatureStatus.ACTIVE if row.archived_at is None else FeatureStatus.ARCHIVED

    async def get_archived_features(self) -> list[FeatureToggle]:
        with self._action("getArchivedFeatures"):
            result = await self._session.execute(
                select(FeatureRow).where(FeatureRow.archived_filter()).order_by(FeatureRow.id)
            )
            return [self._row_to_toggle(row) for row in result.scalars().all()]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_feature(self, toggle: FeatureToggle) -> FeatureToggle:
        with self._action("createFeature", conflict_message=TOGGLE_EXISTS):
            await self._session.execute(insert(FeatureRow).values(**self._toggle_to_row(toggle)))
        return toggle

    async def add_archived_feature(self, toggle: FeatureToggle) -> None:
        values = {**self._toggle_to_row(toggle), "archived_at": utc_now()}
        with self._action("addArchivedFeature", conflict_message=TOGGLE_EXISTS):
            await self._session.execute(insert(FeatureRow).values(**values))

    async def update_feature(self, toggle: FeatureToggle) -> FeatureToggle:
        values = self._toggle_to_row(toggle)
        values.pop("name")
        values.pop("created_at", None)
        with self._action("updateFeature"):
            result = await self._session.execute(
                update(FeatureRow)
                .where(FeatureRow.name == toggle.name, FeatureRow.active_filter())
                .values(**values)
            )
        self._require_row(result, toggle.name)
        return toggle

    async def archive_feature(self, name: str) -> None:
        with self._action("archiveFeature"):
            result = await self._session.execute(
                update(FeatureRow)
                .where(FeatureRow.name == name, FeatureRow.active_filter())
                .values(archived_at=utc_now())
            )
        self._require_row(result, name)

    async def revive_feature(self, name: str) -> None:
        with self._action("reviveFeature"):
            result = await self._session.execute(
                update(FeatureRow)
                .where(FeatureRow.name == name, FeatureRow.archived_filter())
                .values(archived_at=None)
            )
        self._require_row(result, name)

    async def drop_features(self) -> None:
        with self._action("dropFeatures"):
            await self._session.execute(delete(FeatureTagRow))
            await self._session.execute(delete(FeatureRow))

    # ------------------------------------------------------------------
    # Tag links
    # ------------------------------------------------------------------

    async def tag_feature(self, name: str, tag: Tag) -> Tag:
        message = f"Toggle '{name}' is already tagged with {tag.type}:{tag.value}"
        with self._action("tagFeature", conflict_message=message):
            await self._session.execute(
                insert(FeatureTagRow).values(
                    feature_name=name, tag_type=tag.type, tag_value=tag.value
                )
            )
        return tag

    async def untag_feature(self, name: str, tag: Tag) -> None:
        with self._action("untagFeature"):
            await self._session.execute(
                delete(FeatureTagRow).where(
                    FeatureTagRow.feature_name == name,
                    FeatureTagRow.tag_type == tag.type,
                    FeatureTagRow.tag_value == tag.value,
                )
            )

    async def get_tags_for_feature(self, name: str) -> list[Tag]:
        with self._action("getAllTagsForFeature"):
            result = await self._session.execute(
                select(FeatureTagRow.tag_type, FeatureTagRow.tag_value)
                .where(FeatureTagRow.feature_name == name)
                .order_by(FeatureTagRow.tag_type, FeatureTagRow.tag_value)
            )
        return [Tag(type=row.tag_type, value=row.tag_value) for row in result.all()]

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _require_row(result: Any, name: str) -> None:
        if result.rowcount == 0:
            raise NotFoundError(
                f"Could not find feature toggle with name {name}",
                resource="feature",
                identifier=name,
            )

    @staticmethod
    def _toggle_to_row(toggle: FeatureToggle) -> dict[str, Any]:
        row: dict[str, Any] = {
            "name": toggle.name,
            "description": toggle.description,
            "type": toggle.type,
            "project": toggle.project,
            "enabled": toggle.enabled,
            "stale": toggle.stale,
            "strategies": [s.to_dict() for s in toggle.strategies],
            "variants": [v.to_dict() for v in toggle.variants],
        }
        if toggle.created_at is not None:
            row["created_at"] = toggle.created_at
        return row

    @staticmethod
    def _row_to_toggle(row: FeatureRow) -> FeatureToggle:
        return FeatureToggle(
            name=row.name,
            description=row.description or "",
            type=row.type,
            project=row.project,
            enabled=row.enabled,
            stale=row.stale,
            strategies=tuple(Strategy.from_dict(s) for s in row.strategies or []),
            variants=tuple(Variant.from_dict(v) for v in row.variants or []),
            created_at=row.created_at,
        )


__all__ = ["SqlAlchemyFeatureToggleStore"]
