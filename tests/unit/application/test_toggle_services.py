"""Unit tests for FeatureToggleService, TagService and EventService.

Runs against a temporary SQLite file via *aiosqlite*; every call opens its
own unit of work, like an HTTP request does.
"""
from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from togglehouse.adapters.fastapi.deps import ServiceProvider
from togglehouse.adapters.sqlalchemy import SqlAlchemySessionFactory, SqlAlchemyUnitOfWork
from togglehouse.application.toggles import (
    ARCHIVED_TOGGLE_EXISTS,
    TOGGLE_EXISTS,
    EventType,
    FeatureToggle,
    Strategy,
    Tag,
)
from togglehouse.kernel.errors import ConflictError, NotFoundError, ValidationError
from togglehouse.testing.fakes import FakeClock

DEFAULT = (Strategy("default"),)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _setup(tmp_path: Path) -> tuple[SqlAlchemySessionFactory, ServiceProvider]:
    factory = SqlAlchemySessionFactory(f"sqlite+aiosqlite:///{tmp_path / 'toggles.db'}")
    await factory.create_schema()
    return factory, ServiceProvider(factory, clock=FakeClock())


async def _create(provider: ServiceProvider, name: str, **kwargs) -> FeatureToggle:
    async with provider.scope() as svc:
        return await svc.toggles.create_feature(FeatureToggle(name, strategies=DEFAULT, **kwargs))


async def _events(provider: ServiceProvider):
    async with provider.scope() as svc:
        return await svc.events.get_events()


# ---------------------------------------------------------------------------
# FeatureToggleService
# ---------------------------------------------------------------------------


class TestCreateFeature:
    def test_create_emits_created_event(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            created = await _create(provider, "t1", enabled=True)
            assert created.created_at == FakeClock().now()

            events = await _events(provider)
            assert [e.type for e in events] == [EventType.FEATURE_CREATED]
            assert events[0].data["name"] == "t1"
            assert events[0].data["enabled"] is True
            assert events[0].data["createdAt"] == FakeClock().now().isoformat()
            await factory.dispose()

        asyncio.run(run())

    def test_duplicate_active_name(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "ts")
            with pytest.raises(ConflictError) as exc_info:
                await _create(provider, "ts")
            assert exc_info.value.message == TOGGLE_EXISTS
            await factory.dispose()

        asyncio.run(run())

    def test_duplicate_archived_name(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "ts.archived")
            async with provider.scope() as svc:
                await svc.toggles.archive("ts.archived")
            with pytest.raises(ConflictError) as exc_info:
                await _create(provider, "ts.archived")
            assert exc_info.value.message == ARCHIVED_TOGGLE_EXISTS
            await factory.dispose()

        asyncio.run(run())

    def test_invalid_definition_writes_nothing(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            with pytest.raises(ValidationError):
                async with provider.scope() as svc:
                    await svc.toggles.create_feature(FeatureToggle("no.strategy"))
            async with provider.scope() as svc:
                assert await svc.toggles.get_features() == []
            assert await _events(provider) == []
            await factory.dispose()

        asyncio.run(run())


class TestUpdateFeature:
    def test_update_carries_current_tags(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "a_team.toggle", project="projecta")
            async with provider.scope() as svc:
                await svc.toggles.tag_feature("a_team.toggle", Tag("simple", "tag"))
            async with provider.scope() as svc:
                updated = await svc.toggles.update_feature(
                    "a_team.toggle",
                    FeatureToggle("ignored", strategies=DEFAULT, project="projectb"),
                )
            assert updated.name == "a_team.toggle"
            assert updated.project == "projectb"

            latest = (await _events(provider))[0]
            assert latest.type is EventType.FEATURE_UPDATED
            assert latest.tags == (Tag("simple", "tag"),)
            await factory.dispose()

        asyncio.run(run())

    def test_update_missing_toggle(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            with pytest.raises(NotFoundError):
                async with provider.scope() as svc:
                    await svc.toggles.update_feature("nope", FeatureToggle("nope", strategies=DEFAULT))
            await factory.dispose()

        asyncio.run(run())


class TestToggleAndStale:
    def test_toggle_on_off_and_flip(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "t1")
            async with provider.scope() as svc:
                assert (await svc.toggles.toggle("t1", True)).enabled is True
                assert (await svc.toggles.toggle("t1", False)).enabled is False
                assert (await svc.toggles.toggle("t1")).enabled is True
            async with provider.scope() as svc:
                assert (await svc.toggles.get_feature("t1")).enabled is True
            events = await _events(provider)
            assert [e.type for e in events[:3]] == [EventType.FEATURE_UPDATED] * 3
            await factory.dispose()

        asyncio.run(run())

    def test_stale_events(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "toggle-stale")
            async with provider.scope() as svc:
                assert (await svc.toggles.set_stale("toggle-stale", True)).stale is True
                assert (await svc.toggles.set_stale("toggle-stale", False)).stale is False
            types = [e.type for e in await _events(provider)]
            assert types[:2] == [EventType.FEATURE_STALE_OFF, EventType.FEATURE_STALE_ON]
            await factory.dispose()

        asyncio.run(run())


class TestArchiveAndRevive:
    def test_archive_emits_single_event_with_tags(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "a_team.toggle")
            async with provider.scope() as svc:
                await svc.toggles.tag_feature("a_team.toggle", Tag("simple", "tag"))
                await svc.toggles.archive("a_team.toggle")

            events = await _events(provider)
            archived = [e for e in events if e.type is EventType.FEATURE_ARCHIVED]
            assert len(archived) == 1
            assert events[0] == archived[0]
            assert archived[0].tags == (Tag("simple", "tag"),)

            async with provider.scope() as svc:
                with pytest.raises(NotFoundError):
                    await svc.toggles.get_feature("a_team.toggle")
                assert [t.name for t in await svc.toggles.get_archived_features()] == ["a_team.toggle"]
            await factory.dispose()

        asyncio.run(run())

    def test_revive(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "t1")
            async with provider.scope() as svc:
                await svc.toggles.archive("t1")
            async with provider.scope() as svc:
                await svc.toggles.revive("t1")
            async with provider.scope() as svc:
                assert (await svc.toggles.get_feature("t1")).name == "t1"
                assert await svc.toggles.get_archived_features() == []
            assert (await _events(provider))[0].type is EventType.FEATURE_REVIVED
            await factory.dispose()

        asyncio.run(run())

    def test_revive_active_toggle_is_not_found(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "t1")
            with pytest.raises(NotFoundError):
                async with provider.scope() as svc:
                    await svc.toggles.revive("t1")
            await factory.dispose()

        asyncio.run(run())


class TestFeatureTags:
    def test_tag_creates_missing_tag(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "t1")
            async with provider.scope() as svc:
                await svc.toggles.tag_feature("t1", Tag("simple", "TeamRed"))
            async with provider.scope() as svc:
                assert await svc.tags.get_tags() == [Tag("simple", "TeamRed")]
                assert await svc.toggles.get_tags_for_feature("t1") == [Tag("simple", "TeamRed")]

            types = [e.type for e in await _events(provider)]
            assert types[:2] == [EventType.FEATURE_TAGGED, EventType.TAG_CREATED]
            await factory.dispose()

        asyncio.run(run())

    def test_duplicate_tag_link_conflicts(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "t1")
            async with provider.scope() as svc:
                await svc.toggles.tag_feature("t1", Tag("simple", "red"))
            with pytest.raises(ConflictError):
                async with provider.scope() as svc:
                    await svc.toggles.tag_feature("t1", Tag("simple", "red"))
            await factory.dispose()

        asyncio.run(run())

    def test_untag(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "t1")
            async with provider.scope() as svc:
                await svc.toggles.tag_feature("t1", Tag("simple", "red"))
                await svc.toggles.untag_feature("t1", Tag("simple", "red"))
            async with provider.scope() as svc:
                assert await svc.toggles.get_tags_for_feature("t1") == []
            assert (await _events(provider))[0].type is EventType.FEATURE_UNTAGGED
            await factory.dispose()

        asyncio.run(run())

    def test_tags_of_unknown_toggle(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            with pytest.raises(NotFoundError):
                async with provider.scope() as svc:
                    await svc.toggles.get_tags_for_feature("ghost")
            await factory.dispose()

        asyncio.run(run())


class TestValidateName:
    def test_free_name_passes(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            async with provider.scope() as svc:
                await svc.toggles.validate_name("new.name")
            await factory.dispose()

        asyncio.run(run())

    def test_taken_name(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            await _create(provider, "ts")
            with pytest.raises(ConflictError, match="A toggle with that name already exists"):
                async with provider.scope() as svc:
                    await svc.toggles.validate_name("ts")
            await factory.dispose()

        asyncio.run(run())


# ---------------------------------------------------------------------------
# TagService
# ---------------------------------------------------------------------------


class TestTagService:
    def test_create_and_delete_emit_events(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            async with provider.scope() as svc:
                await svc.tags.create_tag(Tag("simple", "red"))
            async with provider.scope() as svc:
                await svc.tags.delete_tag(Tag("simple", "red"))
            async with provider.scope() as svc:
                assert await svc.tags.get_tags() == []
            types = [e.type for e in await _events(provider)]
            assert types == [EventType.TAG_DELETED, EventType.TAG_CREATED]
            await factory.dispose()

        asyncio.run(run())

    def test_deleting_unknown_tag_records_nothing(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            async with provider.scope() as svc:
                await svc.tags.delete_tag(Tag("simple", "ghost"))
            assert await _events(provider) == []
            await factory.dispose()

        asyncio.run(run())

    def test_duplicate_tag_conflicts(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            async with provider.scope() as svc:
                await svc.tags.create_tag(Tag("simple", "red"))
            with pytest.raises(ConflictError):
                async with provider.scope() as svc:
                    await svc.tags.create_tag(Tag("simple", "red"))
            await factory.dispose()

        asyncio.run(run())

    def test_import_is_idempotent(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            tags = [Tag("simple", "red"), Tag("simple", "blue")]
            async with provider.scope() as svc:
                assert await svc.tags.import_tags(tags) == tags
            async with provider.scope() as svc:
                assert await svc.tags.import_tags(tags) == []
            async with provider.scope() as svc:
                assert await svc.tags.get_tags() == [Tag("simple", "blue"), Tag("simple", "red")]

            imports = [e for e in await _events(provider) if e.type is EventType.TAG_IMPORT]
            assert len(imports) == 1
            assert imports[0].data["tags"] == [t.to_dict() for t in tags]
            await factory.dispose()

        asyncio.run(run())

    def test_get_missing_tag(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            with pytest.raises(NotFoundError) as exc_info:
                async with provider.scope() as svc:
                    await svc.tags.get_tag("simple", "nope")
            assert exc_info.value.message == "No tag with type: [simple] and value [nope]"
            await factory.dispose()

        asyncio.run(run())


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


class TestAtomicity:
    def test_failure_after_write_rolls_back_row_and_event(self, tmp_path: Path) -> None:
        async def run() -> None:
            factory, provider = await _setup(tmp_path)
            with pytest.raises(RuntimeError):
                async with provider.scope() as svc:
                    await svc.toggles.create_feature(FeatureToggle("t1", strategies=DEFAULT))
                    raise RuntimeError("boom")
            async with SqlAlchemyUnitOfWork(factory) as uow:
                assert await uow.features.has_feature("t1") is None
                assert await uow.events.get_events() == []
            await factory.dispose()

        asyncio.run(run())
