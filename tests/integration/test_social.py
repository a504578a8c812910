"""
[OK] Integration Tests: Favorites and follows

Idempotent joins with counters kept in step.
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from componentvault.models.component import Component
from componentvault.models.favorite import Favorite
from componentvault.models.follow import Follow
from componentvault.models.user import User
from componentvault.services.favorite_service import FavoriteService
from componentvault.services.follow_service import FollowService


async def _count(session_factory, column, *criteria) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count(column)).where(*criteria))
        return result.scalar_one()


async def _load(session_factory, model, key):
    async with session_factory() as session:
        return await session.get(model, key)


@pytest.mark.asyncio
class TestFavorites:
    """즐겨찾기"""

    async def test_add_favorite_twice_counts_once(
        self, async_client: AsyncClient, test_user, make_user, make_component, token_for, session_factory
    ):
        component = await make_component(test_user.id, likes=0)
        fan = await make_user("uid_fan")
        headers = token_for(fan.id)

        for _ in range(2):
            response = await async_client.post(
                "/v1/favorites", json={"component_id": str(component.id)}, headers=headers
            )
            assert response.status_code == 200

        assert await _count(session_factory, Favorite.id, Favorite.user_id == fan.id) == 1
        assert (await _load(session_factory, Component, component.id)).likes == 1

    async def test_concurrent_duplicate_is_idempotent(
        self, test_user, make_user, make_component, session_factory
    ):
        """존재 확인을 통과한 중복 삽입도 UNIQUE 제약으로 같은 결과"""
        component = await make_component(test_user.id)
        fan = await make_user("uid_fan")
        async with session_factory() as session:
            session.add(Favorite(user_id=fan.id, component_id=component.id))
            await session.commit()

        async with session_factory() as session:
            service = FavoriteService(session)

            async def never_favorited(user_id, component_id):
                return False

            service.is_favorited = never_favorited
            added = await service.add_favorite(fan.id, str(component.id))
            await session.commit()

        assert added is False
        assert await _count(session_factory, Favorite.id) == 1
        assert (await _load(session_factory, Component, component.id)).likes == 0

    async def test_favorite_status_and_listing(
        self, async_client: AsyncClient, test_user, make_user, make_component, token_for
    ):
        first = await make_component(test_user.id, title="First")
        second = await make_component(test_user.id, title="Second")
        fan = await make_user("uid_fan")
        for component in (first, second):
            await async_client.post(
                "/v1/favorites",
                json={"component_id": str(component.id)},
                headers=token_for(fan.id),
            )

        status = await async_client.get(
            "/v1/favorites", params={"user_id": fan.id, "component_id": str(first.id)}
        )
        assert status.json() == {"is_favorited": True}

        listing = await async_client.get("/v1/favorites", params={"user_id": fan.id})
        assert [f["component_id"] for f in listing.json()] == [str(second.id), str(first.id)]

    async def test_favorite_requires_user_record(
        self, async_client: AsyncClient, test_user, make_component, token_for, session_factory
    ):
        component = await make_component(test_user.id, likes=0)

        response = await async_client.post(
            "/v1/favorites",
            json={"component_id": str(component.id)},
            headers=token_for("uid_ghost"),
        )

        assert response.status_code == 404
        assert await _count(session_factory, Favorite.id) == 0
        assert (await _load(session_factory, Component, component.id)).likes == 0

    async def test_user_id_is_required(self, async_client: AsyncClient):
        response = await async_client.get("/v1/favorites")
        assert response.status_code == 400

    async def test_favorite_missing_component(
        self, async_client: AsyncClient, auth_headers
    ):
        response = await async_client.post(
            "/v1/favorites", json={"component_id": str(uuid.uuid4())}, headers=auth_headers
        )
        assert response.status_code == 404

    async def test_remove_favorite_clamps(
        self, async_client: AsyncClient, test_user, make_user, make_component, token_for, session_factory
    ):
        component = await make_component(test_user.id, likes=0)
        fan = await make_user("uid_fan")
        async with session_factory() as session:
            session.add(Favorite(user_id=fan.id, component_id=component.id))
            await session.commit()

        for _ in range(2):
            response = await async_client.delete(
                f"/v1/favorites/{component.id}", headers=token_for(fan.id)
            )
            assert response.status_code == 200

        assert await _count(session_factory, Favorite.id) == 0
        assert (await _load(session_factory, Component, component.id)).likes == 0


@pytest.mark.asyncio
class TestFollows:
    """팔로우"""

    async def test_follow_is_idempotent(
        self, async_client: AsyncClient, test_user, make_user, token_for, session_factory
    ):
        fan = await make_user("uid_fan")

        for _ in range(2):
            response = await async_client.post(
                "/v1/follows", json={"following_id": test_user.id}, headers=token_for(fan.id)
            )
            assert response.status_code == 200

        assert await _count(session_factory, Follow.id) == 1
        assert (await _load(session_factory, User, fan.id)).following == 1
        assert (await _load(session_factory, User, test_user.id)).followers == 1

        status = await async_client.get(
            "/v1/follows", params={"follower_id": fan.id, "following_id": test_user.id}
        )
        assert status.json() == {"is_following": True}

    async def test_follow_requires_user_record(
        self, async_client: AsyncClient, test_user, token_for, session_factory
    ):
        response = await async_client.post(
            "/v1/follows", json={"following_id": test_user.id}, headers=token_for("uid_ghost")
        )

        assert response.status_code == 404
        assert await _count(session_factory, Follow.id) == 0
        assert (await _load(session_factory, User, test_user.id)).followers == 0

    async def test_self_follow_rejected(self, async_client: AsyncClient, test_user, auth_headers):
        response = await async_client.post(
            "/v1/follows", json={"following_id": test_user.id}, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_follow_missing_user(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/v1/follows", json={"following_id": "uid_nobody"}, headers=auth_headers
        )
        assert response.status_code == 404

    async def test_unfollow_clamps_counters(
        self, async_client: AsyncClient, test_user, make_user, token_for, session_factory
    ):
        fan = await make_user("uid_fan")
        await async_client.post(
            "/v1/follows", json={"following_id": test_user.id}, headers=token_for(fan.id)
        )

        for _ in range(2):
            response = await async_client.delete(
                f"/v1/follows/{test_user.id}", headers=token_for(fan.id)
            )
            assert response.status_code == 200

        assert (await _load(session_factory, User, fan.id)).following == 0
        assert (await _load(session_factory, User, test_user.id)).followers == 0

    async def test_concurrent_duplicate_follow(
        self, test_user, make_user, session_factory
    ):
        fan = await make_user("uid_fan")
        async with session_factory() as session:
            session.add(Follow(follower_id=fan.id, following_id=test_user.id))
            await session.commit()

        async with session_factory() as session:
            service = FollowService(session)

            async def not_following(follower_id, following_id):
                return False

            service.is_following = not_following
            followed = await service.follow(fan.id, test_user.id)
            await session.commit()

        assert followed is False
        assert await _count(session_factory, Follow.id) == 1
