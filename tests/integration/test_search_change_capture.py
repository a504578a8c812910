"""
[OK] Integration Tests: Search change capture

Session-level recording of searchable record changes, settled on commit.
"""

import uuid

import pytest
from sqlalchemy import select

from componentvault.models.collection import Collection, CollectionComponent
from componentvault.models.component import Component
from componentvault.search.changes import (
    ChangeOperation,
    DocumentChange,
    drain_committed_changes,
    publish_committed_changes,
    record_change,
)
from componentvault.services.counters import decrement_clamped, increment


def _keys(changes):
    return {(c.index, c.object_id, c.operation) for c in changes}


@pytest.mark.asyncio
class TestChangeCapture:
    """변경 수집"""

    async def test_committed_insert_is_captured(self, session_factory, make_user):
        user = await make_user("uid_owner")

        async with session_factory() as session:
            component = Component(
                title="Card",
                description="Card",
                code="<div />",
                preview_image="https://x/card.png",
                author_id=user.id,
            )
            session.add(component)
            await session.commit()

            changes = drain_committed_changes(session)

        assert _keys(changes) == {
            ("components", str(component.id), ChangeOperation.CREATE)
        }

    async def test_rolled_back_changes_are_discarded(self, session_factory, make_user):
        user = await make_user("uid_owner")

        async with session_factory() as session:
            session.add(
                Component(
                    title="Card",
                    description="Card",
                    code="<div />",
                    preview_image="https://x/card.png",
                    author_id=user.id,
                )
            )
            await session.flush()
            await session.rollback()

            assert drain_committed_changes(session) == []

    async def test_counter_updates_are_recorded(
        self, session_factory, make_user, make_component
    ):
        user = await make_user("uid_owner")
        component = await make_component(user.id, likes=1)

        async with session_factory() as session:
            await increment(session, Component, component.id, "views")
            await decrement_clamped(session, Component, component.id, "likes")
            await session.commit()
            changes = drain_committed_changes(session)

        assert _keys(changes) == {
            ("components", str(component.id), ChangeOperation.UPDATE)
        }

    async def test_missing_record_counter_update_is_not_recorded(self, session_factory):
        async with session_factory() as session:
            assert not await increment(session, Component, uuid.uuid4(), "views")
            await session.commit()
            assert drain_committed_changes(session) == []

    async def test_savepoint_rollback_keeps_outer_changes(
        self, session_factory, make_user, make_component
    ):
        user = await make_user("uid_owner")
        component = await make_component(user.id)

        async with session_factory() as session:
            await increment(session, Component, component.id, "views")
            try:
                async with session.begin_nested():
                    await session.execute(select(Component.id))
                    raise RuntimeError("inner failure")
            except RuntimeError:
                pass
            await session.commit()
            changes = drain_committed_changes(session)

        assert len(changes) == 1

    async def test_savepoint_rollback_discards_inner_changes(
        self, session_factory, make_user, make_component
    ):
        user = await make_user("uid_owner")
        outer = await make_component(user.id, title="Outer")
        inner = await make_component(user.id, title="Inner")

        async with session_factory() as session:
            await increment(session, Component, outer.id, "views")
            try:
                async with session.begin_nested():
                    await increment(session, Component, inner.id, "views")
                    raise RuntimeError("inner failure")
            except RuntimeError:
                pass
            await session.commit()
            changes = drain_committed_changes(session)

        assert _keys(changes) == {
            ("components", str(outer.id), ChangeOperation.UPDATE)
        }

    async def test_released_savepoint_keeps_inner_changes(
        self, session_factory, make_user, make_component
    ):
        user = await make_user("uid_owner")
        component = await make_component(user.id)

        async with session_factory() as session:
            async with session.begin_nested():
                await increment(session, Component, component.id, "views")
            await session.commit()
            changes = drain_committed_changes(session)

        assert _keys(changes) == {
            ("components", str(component.id), ChangeOperation.UPDATE)
        }

    async def test_membership_rows_map_to_collection_update(
        self, session_factory, make_user, make_component
    ):
        user = await make_user("uid_owner")
        component = await make_component(user.id)

        async with session_factory() as session:
            collection = Collection(name="Forms", user_id=user.id)
            session.add(collection)
            await session.commit()
            drain_committed_changes(session)

            session.add(
                CollectionComponent(collection_id=collection.id, component_id=component.id)
            )
            await session.commit()
            changes = drain_committed_changes(session)

        assert _keys(changes) == {
            ("collections", str(collection.id), ChangeOperation.UPDATE)
        }

    async def test_delete_wins_over_update(self, session_factory):
        async with session_factory() as session:
            record_change(session, "components", "c1", ChangeOperation.UPDATE)
            record_change(session, "components", "c1", ChangeOperation.DELETE)
            record_change(session, "components", "c1", ChangeOperation.UPDATE)
            record_change(session, "components", "c2", ChangeOperation.CREATE)
            record_change(session, "components", "c2", ChangeOperation.UPDATE)
            await session.execute(select(Component.id))
            await session.commit()

            changes = drain_committed_changes(session)

        assert _keys(changes) == {
            ("components", "c1", ChangeOperation.DELETE),
            ("components", "c2", ChangeOperation.CREATE),
        }

    async def test_publish_hands_changes_to_publisher(self, session_factory, publisher):
        async with session_factory() as session:
            record_change(session, "users", "u1", ChangeOperation.UPDATE)
            await session.execute(select(Component.id))
            await session.commit()

            await publish_committed_changes(session, publisher)
            await publish_committed_changes(session, publisher)

        assert publisher.changes == [
            DocumentChange(index="users", object_id="u1", operation=ChangeOperation.UPDATE)
        ]
