"""
[OK] Integration Tests: Search index synchronization

Inline delivery, full resync and the store-side search fallback.
"""

import pytest
from httpx import AsyncClient

from componentvault.search import publishers
from componentvault.search.publishers import CeleryChangePublisher, InlineChangePublisher
from componentvault.search.synchronizer import SearchIndexSynchronizer
from componentvault.tasks.search_sync import sync_search_document

COMPONENT_PAYLOAD = {
    "title": "Pricing Table",
    "description": "Three tier pricing table",
    "code": "<table />",
    "preview_image": "https://cdn.example.com/pricing.png",
    "category": "tables",
    "tags": ["pricing", "saas"],
}


@pytest.fixture
def inline_app(app, session_factory, search_index):
    app.state.search_index = search_index
    app.state.change_publisher = InlineChangePublisher(
        SearchIndexSynchronizer(search_index), session_factory
    )
    return app


@pytest.mark.asyncio
class TestInlineSync:
    """요청 직후 동기화"""

    async def test_create_then_delete(
        self, inline_app, async_client: AsyncClient, auth_headers, search_index
    ):
        created = await async_client.post(
            "/v1/components", json=COMPONENT_PAYLOAD, headers=auth_headers
        )
        component_id = created.json()["component_id"]

        indexed = search_index.objects("components")[component_id]
        assert indexed["name"] == "Pricing Table"
        assert indexed["tags"] == ["pricing", "saas"]

        await async_client.delete(f"/v1/components/{component_id}", headers=auth_headers)

        assert component_id not in search_index.objects("components")

    async def test_counter_update_reaches_index(
        self, inline_app, async_client: AsyncClient, test_user, make_component, search_index
    ):
        component = await make_component(test_user.id, likes=1)

        await async_client.post(
            f"/v1/components/{component.id}/metrics", json={"action": "like"}
        )

        assert search_index.objects("components")[str(component.id)]["likes"] == 2

    async def test_index_failure_does_not_fail_request(
        self, inline_app, async_client: AsyncClient, auth_headers, search_index
    ):
        search_index.fail_with = RuntimeError("index unavailable")

        response = await async_client.post(
            "/v1/components", json=COMPONENT_PAYLOAD, headers=auth_headers
        )

        assert response.status_code == 201


@pytest.mark.asyncio
class TestResync:
    """전체 재동기화"""

    async def test_resync_batches_each_index(
        self, app, async_client: AsyncClient, auth_headers, test_user, make_component, search_index
    ):
        app.state.search_index = search_index
        await make_component(test_user.id, title="One")
        await make_component(test_user.id, title="Two", is_public=False)
        await async_client.post("/v1/collections", json={"name": "Kit"}, headers=auth_headers)

        response = await async_client.post("/v1/search/resync", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "All data synced to search index"
        assert data["results"] == {"components": 2, "users": 1, "collections": 1}
        assert search_index.batch_calls == ["components", "users", "collections"]

    async def test_deleted_records_are_not_resurrected(
        self, app, async_client: AsyncClient, auth_headers, test_user, make_component, search_index
    ):
        app.state.search_index = search_index
        keep = await make_component(test_user.id, title="Keep")
        gone = await make_component(test_user.id, title="Gone")
        await async_client.delete(f"/v1/components/{gone.id}", headers=auth_headers)

        await async_client.post("/v1/search/resync", headers=auth_headers)

        assert set(search_index.objects("components")) == {str(keep.id)}

    async def test_resync_without_index_is_503(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post("/v1/search/resync", headers=auth_headers)

        assert response.status_code == 503
        assert response.json()["error"] == "external_service_error"

    async def test_resync_failure_is_generic_500(
        self, app, async_client: AsyncClient, auth_headers, test_user, make_component, search_index
    ):
        app.state.search_index = search_index
        await make_component(test_user.id)
        search_index.fail_with = RuntimeError("batch rejected")

        response = await async_client.post("/v1/search/resync", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["error"] == "internal"
        assert "batch rejected" not in response.text

    async def test_resync_requires_auth(self, app, async_client: AsyncClient, search_index):
        app.state.search_index = search_index

        response = await async_client.post("/v1/search/resync")

        assert response.status_code == 401


@pytest.mark.asyncio
class TestStoreSearch:
    """저장소 기반 검색"""

    async def test_matches_title_and_tags(
        self, async_client: AsyncClient, test_user, make_component
    ):
        await make_component(test_user.id, title="Glass Card", tags=["card"])
        await make_component(test_user.id, title="Modal", tags=["Glassmorphism"])
        await make_component(test_user.id, title="Glass Secret", is_public=False)
        await make_component(test_user.id, title="Toast", tags=["notification"])

        response = await async_client.get("/v1/search", params={"q": "glass"})

        assert response.status_code == 200
        titles = {c["title"] for c in response.json()}
        assert titles == {"Glass Card", "Modal"}
        assert all("code" not in c for c in response.json())

    async def test_query_is_required(self, async_client: AsyncClient):
        assert (await async_client.get("/v1/search")).status_code == 400


@pytest.mark.asyncio
class TestCeleryPublishing:
    """Celery 태스크 발행"""

    async def test_enqueues_each_change(
        self, app, async_client: AsyncClient, auth_headers, monkeypatch
    ):
        enqueued = []
        monkeypatch.setattr(
            sync_search_document, "delay", lambda *args: enqueued.append(args)
        )
        app.state.change_publisher = CeleryChangePublisher()

        created = await async_client.post(
            "/v1/components", json=COMPONENT_PAYLOAD, headers=auth_headers
        )

        assert created.status_code == 201
        assert ("components", created.json()["component_id"], "create") in enqueued

    async def test_broker_failure_does_not_fail_request(
        self, app, async_client: AsyncClient, auth_headers, monkeypatch
    ):
        captured = []

        def broker_down(*args):
            raise ConnectionError("broker unreachable")

        monkeypatch.setattr(sync_search_document, "delay", broker_down)
        monkeypatch.setattr(
            publishers,
            "capture_exception_with_context",
            lambda exc, **extra: captured.append(extra),
        )
        app.state.change_publisher = CeleryChangePublisher()

        response = await async_client.post(
            "/v1/components", json=COMPONENT_PAYLOAD, headers=auth_headers
        )

        assert response.status_code == 201
        assert {
            "index": "components",
            "object_id": response.json()["component_id"],
            "operation": "create",
        } in captured
