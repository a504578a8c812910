"""
[OK] Integration Tests: Component API

Listing, detail, create/update/delete ownership and metric actions.
"""

import asyncio
import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from componentvault.models.activity import Activity
from componentvault.models.base import Base, create_session_factory, enable_sqlite_savepoints
from componentvault.models.component import Component
from componentvault.models.favorite import Favorite
from componentvault.models.user import User
from componentvault.services.counters import decrement_clamped

NEW_COMPONENT = {
    "title": "Glass Card",
    "description": "Frosted glass card",
    "code": "export const Card = () => <div className='glass' />",
    "preview_image": "https://cdn.example.com/glass.png",
    "category": "cards",
    "framework": "react",
    "tags": ["card", "glass"],
}


async def _load(session_factory, model, key):
    async with session_factory() as session:
        return await session.get(model, key)


@pytest.mark.asyncio
class TestComponentCrud:
    """컴포넌트 등록/조회/수정/삭제"""

    async def test_create_component(
        self, async_client: AsyncClient, auth_headers, test_user, session_factory, publisher
    ):
        response = await async_client.post(
            "/v1/components", json=NEW_COMPONENT, headers=auth_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        component_id = data["component_id"]

        component = await _load(session_factory, Component, uuid.UUID(component_id))
        assert component.author_id == test_user.id
        assert (component.views, component.downloads, component.copies, component.likes) == (
            0,
            0,
            0,
            0,
        )

        author = await _load(session_factory, User, test_user.id)
        assert author.total_components == 1

        async with session_factory() as session:
            activity = (
                await session.execute(select(Activity).where(Activity.user_id == test_user.id))
            ).scalar_one()
        assert activity.type == "upload"
        assert activity.target_id == component_id

        assert ("components", component_id, "create") in publisher.keys()
        assert ("users", test_user.id, "update") in publisher.keys()

    async def test_create_requires_token(self, async_client: AsyncClient):
        response = await async_client.post("/v1/components", json=NEW_COMPONENT)

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    async def test_create_rejects_invalid_token(self, async_client: AsyncClient, test_user):
        response = await async_client.post(
            "/v1/components",
            json=NEW_COMPONENT,
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    async def test_create_validates_required_fields(
        self, async_client: AsyncClient, auth_headers
    ):
        payload = dict(NEW_COMPONENT, code="   ")
        response = await async_client.post("/v1/components", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    async def test_create_without_user_record_is_404(self, async_client: AsyncClient, token_for):
        response = await async_client.post(
            "/v1/components", json=NEW_COMPONENT, headers=token_for("uid_ghost")
        )
        assert response.status_code == 404

    async def test_get_component_increments_views(
        self, async_client: AsyncClient, test_user, make_component, session_factory
    ):
        component = await make_component(test_user.id, views=4)

        response = await async_client.get(f"/v1/components/{component.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["views"] == 5
        assert body["code"] == component.code
        assert (await _load(session_factory, Component, component.id)).views == 5

    async def test_get_missing_component(self, async_client: AsyncClient):
        assert (await async_client.get(f"/v1/components/{uuid.uuid4()}")).status_code == 404
        assert (await async_client.get("/v1/components/not-a-uuid")).status_code == 404

    async def test_update_is_owner_only(
        self, async_client: AsyncClient, test_user, make_user, make_component, token_for
    ):
        component = await make_component(test_user.id)
        other = await make_user("uid_other")

        forbidden = await async_client.put(
            f"/v1/components/{component.id}",
            json={"title": "Hijacked"},
            headers=token_for(other.id),
        )
        assert forbidden.status_code == 403

        response = await async_client.put(
            f"/v1/components/{component.id}",
            json={"title": "Renamed", "tags": ["renamed"]},
            headers=token_for(test_user.id),
        )
        assert response.status_code == 200
        assert response.json()["component"]["title"] == "Renamed"
        assert response.json()["component"]["tags"] == ["renamed"]

    async def test_delete_component(
        self,
        async_client: AsyncClient,
        auth_headers,
        test_user,
        make_user,
        make_component,
        session_factory,
        publisher,
    ):
        created = await async_client.post(
            "/v1/components", json=NEW_COMPONENT, headers=auth_headers
        )
        component_id = created.json()["component_id"]
        fan = await make_user("uid_fan")
        async with session_factory() as session:
            session.add(Favorite(user_id=fan.id, component_id=uuid.UUID(component_id)))
            await session.commit()

        response = await async_client.delete(
            f"/v1/components/{component_id}", headers=auth_headers
        )

        assert response.status_code == 200
        assert await _load(session_factory, Component, uuid.UUID(component_id)) is None
        assert (await _load(session_factory, User, test_user.id)).total_components == 0
        async with session_factory() as session:
            remaining = await session.execute(select(func.count(Favorite.id)))
            assert remaining.scalar_one() == 0
        assert ("components", component_id, "delete") in publisher.keys()


@pytest.mark.asyncio
class TestComponentListing:
    """컴포넌트 목록"""

    async def test_public_only_by_default(
        self, async_client: AsyncClient, test_user, make_component
    ):
        await make_component(test_user.id, title="Public")
        await make_component(test_user.id, title="Private", is_public=False)

        response = await async_client.get("/v1/components")

        assert response.status_code == 200
        titles = [c["title"] for c in response.json()]
        assert titles == ["Public"]
        assert "code" not in response.json()[0]

    async def test_filters_and_ordering(
        self, async_client: AsyncClient, test_user, make_component
    ):
        await make_component(test_user.id, title="A", likes=3, framework="vue")
        await make_component(test_user.id, title="B", likes=9, framework="react")
        await make_component(test_user.id, title="C", likes=5, framework="react")

        response = await async_client.get(
            "/v1/components", params={"framework": "react", "order_by": "likes"}
        )
        assert [c["title"] for c in response.json()] == ["B", "C"]

        response = await async_client.get(
            "/v1/components", params={"order_by": "likes", "order": "asc", "limit": 2}
        )
        assert [c["title"] for c in response.json()] == ["A", "C"]

    async def test_invalid_order_by(self, async_client: AsyncClient):
        response = await async_client.get("/v1/components", params={"order_by": "code"})
        assert response.status_code == 400

    async def test_include_private_requires_owner(
        self, async_client: AsyncClient, test_user, make_user, make_component, token_for
    ):
        await make_component(test_user.id, title="Public")
        await make_component(test_user.id, title="Private", is_public=False)
        other = await make_user("uid_other")
        params = {"author_id": test_user.id, "include_private": "true"}

        assert (await async_client.get("/v1/components", params=params)).status_code == 401

        response = await async_client.get(
            "/v1/components", params=params, headers=token_for(other.id)
        )
        assert response.status_code == 403

        response = await async_client.get(
            "/v1/components", params=params, headers=token_for(test_user.id)
        )
        assert response.status_code == 200
        assert sorted(c["title"] for c in response.json()) == ["Private", "Public"]


@pytest.mark.asyncio
class TestComponentMetrics:
    """지표 액션"""

    @pytest.mark.parametrize(
        "action, field",
        [("view", "views"), ("download", "downloads"), ("copy", "copies"), ("like", "likes")],
    )
    async def test_increment_actions(
        self, async_client: AsyncClient, test_user, make_component, session_factory, action, field
    ):
        component = await make_component(test_user.id)

        response = await async_client.post(
            f"/v1/components/{component.id}/metrics", json={"action": action}
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert getattr(await _load(session_factory, Component, component.id), field) == 1

    async def test_download_on_legacy_component_without_downloads(
        self, async_client: AsyncClient, test_user, make_component, session_factory
    ):
        component = await make_component(test_user.id, downloads=None, copies=7)

        await async_client.post(
            f"/v1/components/{component.id}/metrics", json={"action": "download"}
        )

        assert (await _load(session_factory, Component, component.id)).downloads == 1

    async def test_unknown_action(self, async_client: AsyncClient, test_user, make_component):
        component = await make_component(test_user.id)

        response = await async_client.post(
            f"/v1/components/{component.id}/metrics", json={"action": "explode"}
        )
        assert response.status_code == 400

    async def test_increment_on_missing_component(self, async_client: AsyncClient):
        response = await async_client.post(
            f"/v1/components/{uuid.uuid4()}/metrics", json={"action": "view"}
        )
        assert response.status_code == 404

    async def test_unlike_on_missing_component_is_noop(self, async_client: AsyncClient):
        response = await async_client.post(
            f"/v1/components/{uuid.uuid4()}/metrics", json={"action": "unlike"}
        )
        assert response.status_code == 200

    async def test_unlike_clamps_sequentially(
        self, async_client: AsyncClient, test_user, make_component, session_factory
    ):
        component = await make_component(test_user.id, likes=1)

        for _ in range(3):
            response = await async_client.post(
                f"/v1/components/{component.id}/metrics", json={"action": "unlike"}
            )
            assert response.status_code == 200

        assert (await _load(session_factory, Component, component.id)).likes == 0

    async def test_copy_endpoint(
        self, async_client: AsyncClient, test_user, make_component, session_factory
    ):
        component = await make_component(test_user.id, copies=2)

        response = await async_client.post(f"/v1/components/{component.id}/copy")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert (await _load(session_factory, Component, component.id)).copies == 3


@pytest.mark.asyncio
async def test_concurrent_unlikes_never_go_negative(tmp_path):
    """동시 unlike: 파일 기반 SQLite에서 서로 다른 연결로 동시에 감소"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'clamp.db'}")
    enable_sqlite_savepoints(engine, "BEGIN IMMEDIATE")
    session_factory: async_sessionmaker = create_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        session.add(User(id="uid_owner", badges=[]))
        component = Component(
            title="Toggle",
            description="Toggle",
            code="<input />",
            preview_image="https://x/toggle.png",
            author_id="uid_owner",
            likes=2,
        )
        session.add(component)
        await session.commit()

    async def unlike():
        async with session_factory() as session:
            await decrement_clamped(session, Component, component.id, "likes")
            await session.commit()

    await asyncio.gather(*(unlike() for _ in range(8)))

    async with session_factory() as session:
        likes = (
            await session.execute(select(Component.likes).where(Component.id == component.id))
        ).scalar_one()

    await engine.dispose()
    assert likes == 0
