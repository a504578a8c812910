"""
[OK] Integration Tests: Collection API
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from componentvault.models.activity import Activity


@pytest.mark.asyncio
class TestCollections:
    """컬렉션 관리"""

    async def _create(self, async_client, headers, **fields):
        payload = {"name": "Forms"}
        payload.update(fields)
        response = await async_client.post("/v1/collections", json=payload, headers=headers)
        assert response.status_code == 201
        return response.json()["collection_id"]

    async def test_create_defaults_to_public(
        self, async_client: AsyncClient, auth_headers, test_user, session_factory, publisher
    ):
        collection_id = await self._create(async_client, auth_headers)

        response = await async_client.get(f"/v1/collections/{collection_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["is_public"] is True
        assert data["component_ids"] == []
        assert data["user_id"] == test_user.id
        assert data["user_name"] == "Ada"
        assert ("collections", collection_id, "create") in publisher.keys()

        async with session_factory() as session:
            activity = (
                await session.execute(select(Activity).where(Activity.type == "collection"))
            ).scalar_one()
        assert activity.target_id == collection_id

    async def test_name_is_required(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post("/v1/collections", json={}, headers=auth_headers)
        assert response.status_code == 400

    async def test_list_by_user(self, async_client: AsyncClient, auth_headers, test_user):
        await self._create(async_client, auth_headers, name="One")
        await self._create(async_client, auth_headers, name="Two", is_public=False)

        response = await async_client.get("/v1/collections", params={"user_id": test_user.id})

        assert [c["name"] for c in response.json()] == ["Two", "One"]
        assert (await async_client.get("/v1/collections")).status_code == 400

    async def test_missing_collection(self, async_client: AsyncClient):
        assert (await async_client.get(f"/v1/collections/{uuid.uuid4()}")).status_code == 404

    async def test_add_components_is_a_union(
        self, async_client: AsyncClient, auth_headers, test_user, make_component
    ):
        first = await make_component(test_user.id, title="First")
        second = await make_component(test_user.id, title="Second")
        collection_id = await self._create(async_client, auth_headers)

        await async_client.post(
            f"/v1/collections/{collection_id}/components",
            json={"component_ids": [str(first.id)]},
            headers=auth_headers,
        )
        response = await async_client.post(
            f"/v1/collections/{collection_id}/components",
            json={"component_ids": [str(first.id), str(second.id), str(second.id)]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["component_ids"] == [str(first.id), str(second.id)]

    async def test_add_unknown_component(
        self, async_client: AsyncClient, auth_headers
    ):
        collection_id = await self._create(async_client, auth_headers)

        missing = await async_client.post(
            f"/v1/collections/{collection_id}/components",
            json={"component_ids": [str(uuid.uuid4())]},
            headers=auth_headers,
        )
        invalid = await async_client.post(
            f"/v1/collections/{collection_id}/components",
            json={"component_ids": ["not-a-uuid"]},
            headers=auth_headers,
        )
        empty = await async_client.post(
            f"/v1/collections/{collection_id}/components",
            json={"component_ids": []},
            headers=auth_headers,
        )

        assert missing.status_code == 404
        assert invalid.status_code == 400
        assert empty.status_code == 400

    async def test_remove_component(
        self, async_client: AsyncClient, auth_headers, test_user, make_component, publisher
    ):
        component = await make_component(test_user.id)
        collection_id = await self._create(async_client, auth_headers)
        await async_client.post(
            f"/v1/collections/{collection_id}/components",
            json={"component_ids": [str(component.id)]},
            headers=auth_headers,
        )
        publisher.changes.clear()

        response = await async_client.delete(
            f"/v1/collections/{collection_id}/components/{component.id}",
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["component_ids"] == []
        assert ("collections", collection_id, "update") in publisher.keys()

    async def test_owner_only_mutations(
        self, async_client: AsyncClient, auth_headers, make_user, token_for
    ):
        collection_id = await self._create(async_client, auth_headers)
        intruder = token_for((await make_user("uid_intruder")).id)

        assert (
            await async_client.put(
                f"/v1/collections/{collection_id}", json={"name": "Mine"}, headers=intruder
            )
        ).status_code == 403
        assert (
            await async_client.delete(f"/v1/collections/{collection_id}", headers=intruder)
        ).status_code == 403
        assert (
            await async_client.post(
                f"/v1/collections/{collection_id}/components",
                json={"component_ids": [str(uuid.uuid4())]},
                headers=intruder,
            )
        ).status_code == 403

    async def test_update_and_delete(self, async_client: AsyncClient, auth_headers, publisher):
        collection_id = await self._create(async_client, auth_headers)

        updated = await async_client.put(
            f"/v1/collections/{collection_id}",
            json={"name": "Inputs", "is_public": False},
            headers=auth_headers,
        )
        assert updated.json()["name"] == "Inputs"
        assert updated.json()["is_public"] is False

        deleted = await async_client.delete(
            f"/v1/collections/{collection_id}", headers=auth_headers
        )
        assert deleted.status_code == 200
        assert (await async_client.get(f"/v1/collections/{collection_id}")).status_code == 404
        assert ("collections", collection_id, "delete") in publisher.keys()
