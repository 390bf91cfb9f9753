"""SQLAlchemy adapter – SqlAlchemyTagStore."""
from __future__ import annotations

from typing import Any

from sqlalchemy import delete, exists, insert, select

from togglehouse.adapters.sqlalchemy.errors import SqlAlchemyStoreBase
from togglehouse.adapters.sqlalchemy.models import FeatureTagRow, TagRow
from togglehouse.application.toggles.models import Tag
from togglehouse.application.toggles.ports import TagStore
from togglehouse.kernel.errors import NotFoundError

IMPORT_BATCH_SIZE = 400


class SqlAlchemyTagStore(SqlAlchemyStoreBase, TagStore):
    """Tags keyed by ``(type, value)``; no surrogate id, no updates."""

    STORE = "tag"

    async def get_all(self) -> list[Tag]:
        with self._action("getAll"):
            result = await self._session.execute(
                select(TagRow.type, TagRow.value).order_by(TagRow.type, TagRow.value)
            )
        return [self._row_to_tag(row) for row in result.all()]

    async def get_tags_by_type(self, tag_type: str) -> list[Tag]:
        with self._action("getTagByType"):
            result = await self._session.execute(
                select(TagRow.type, TagRow.value)
                .where(TagRow.type == tag_type)
                .order_by(TagRow.value)
            )
        return [self._row_to_tag(row) for row in result.all()]

    async def get_tag(self, tag_type: str, value: str) -> Tag:
        with self._action("getTag"):
            result = await self._session.execute(
                select(TagRow.type, TagRow.value).where(
                    TagRow.type == tag_type, TagRow.value == value
                )
            )
            row = result.first()
        if row is None:
            raise NotFoundError(
                f"No tag with type: [{tag_type}] and value [{value}]",
                resource="tag",
                identifier=f"{tag_type}:{value}",
            )
        return self._row_to_tag(row)

    async def exists(self, tag: Tag) -> bool:
        with self._action("exists"):
            result = await self._session.execute(
                select(exists().where(TagRow.type == tag.type, TagRow.value == tag.value))
            )
            return bool(result.scalar())

    async def create_tag(self, tag: Tag) -> None:
        message = f"Tag with type [{tag.type}] and value [{tag.value}] already exists"
        with self._action("createTag", conflict_message=message):
            await self._session.execute(insert(TagRow).values(type=tag.type, value=tag.value))

    async def delete_tag(self, tag: Tag) -> None:
        with self._action("deleteTag"):
            await self._session.execute(
                delete(FeatureTagRow).where(
                    FeatureTagRow.tag_type == tag.type,
                    FeatureTagRow.tag_value == tag.value,
                )
            )
            await self._session.execute(
                delete(TagRow).where(TagRow.type == tag.type, TagRow.value == tag.value)
            )

    async def bulk_import(self, tags: list[Tag]) -> list[Tag]:
        """Insert *tags*, ignoring keys that already exist.

        Returns the tags the database reports as inserted, in input order.
        Duplicates within *tags* collapse to their first occurrence. Rows
        go in batches of ``IMPORT_BATCH_SIZE`` to stay under the bind
        parameter limit of older SQLite builds.
        """
        unique = list(dict.fromkeys(Tag(t.type, t.value) for t in tags))
        inserted: set[Tag] = set()

        with self._action("bulkImport"):
            for start in range(0, len(unique), IMPORT_BATCH_SIZE):
                batch = unique[start:start + IMPORT_BATCH_SIZE]
                result = await self._session.execute(
                    self._insert_ignoring_conflicts([t.to_dict() for t in batch])
                )
                inserted.update(self._row_to_tag(row) for row in result.all())
        return [t for t in unique if t in inserted]

    async def drop_tags(self) -> None:
        with self._action("dropTags"):
            await self._session.execute(delete(FeatureTagRow))
            await self._session.execute(delete(TagRow))

    def _insert_ignoring_conflicts(self, rows: list[dict[str, str]]) -> Any:
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert as dialect_insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert as dialect_insert
        else:
            raise NotImplementedError(f"bulk tag import is not supported on {dialect!r}")
        table = TagRow.__table__
        return (
            dialect_insert(table)
            .values(rows)
            .on_conflict_do_nothing(index_elements=["type", "value"])
            .returning(table.c.type, table.c.value)
        )

    @staticmethod
    def _row_to_tag(row: Any) -> Tag:
        return Tag(type=row.type, value=row.value)


__all__ = ["IMPORT_BATCH_SIZE", "SqlAlchemyTagStore"]
