"""
Pytest configuration and shared fixtures
"""

from typing import Any, AsyncGenerator, Dict, List, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from componentvault.config import TestSettings
from componentvault.main import create_app
from componentvault.models.base import create_engine, create_session_factory, init_db
from componentvault.models.component import Component
from componentvault.models.user import User
from componentvault.utils.security import JWTManager


class RecordingPublisher:
    """Captures published search changes instead of delivering them."""

    def __init__(self):
        self.changes = []

    async def publish(self, changes) -> None:
        self.changes.extend(changes)

    def keys(self) -> set:
        return {(c.index, c.object_id, c.operation.value) for c in self.changes}


class InMemorySearchIndex:
    """Search index double with the SearchIndexClient write surface."""

    def __init__(self):
        self.indices: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.batch_calls: List[str] = []
        self.fail_with: Optional[Exception] = None

    def objects(self, index: str) -> Dict[str, Dict[str, Any]]:
        return self.indices.setdefault(index, {})

    async def save_object(self, index: str, obj: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail_with:
            raise self.fail_with
        self.objects(index)[obj["objectID"]] = obj
        return {}

    async def save_objects(self, index: str, objects: List[Dict[str, Any]]) -> Dict[str, Any]:
        if self.fail_with:
            raise self.fail_with
        self.batch_calls.append(index)
        for obj in objects:
            self.objects(index)[obj["objectID"]] = obj
        return {}

    async def delete_object(self, index: str, object_id: str) -> Dict[str, Any]:
        if self.fail_with:
            raise self.fail_with
        self.objects(index).pop(object_id, None)
        return {}

    async def aclose(self) -> None:
        return None


@pytest.fixture
def settings() -> TestSettings:
    return TestSettings()


@pytest_asyncio.fixture(scope="function")
async def engine(settings: TestSettings) -> AsyncGenerator[AsyncEngine, None]:
    """
    Fresh in-memory SQLite database per test (StaticPool, savepoints enabled).
    """
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def search_index() -> InMemorySearchIndex:
    return InMemorySearchIndex()


@pytest.fixture
def app(settings, session_factory, publisher):
    """
    Application wired the way the lifespan would wire it, with test doubles.
    """
    app = create_app(settings)
    app.state.session_factory = session_factory
    app.state.search_index = None
    app.state.change_publisher = publisher
    return app


@pytest_asyncio.fixture(scope="function")
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def make_user(session_factory):
    """Factory inserting a committed user record."""

    async def _make(user_id: Optional[str] = None, **fields) -> User:
        user_id = user_id or f"uid_{uuid4().hex[:12]}"
        values = {
            "email": f"{user_id}@example.com",
            "display_name": "Test User",
            "badges": [],
            "followers": 0,
            "following": 0,
            "total_components": 0,
            "total_likes": 0,
        }
        values.update(fields)
        user = User(id=user_id, **values)
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _make


@pytest.fixture
def make_component(session_factory):
    """Factory inserting a committed component owned by author_id."""

    async def _make(author_id: str, **fields) -> Component:
        values = {
            "title": "Gradient Button",
            "description": "A button with a gradient background",
            "code": "export const Button = () => <button />",
            "preview_image": "https://cdn.example.com/button.png",
            "category": "buttons",
            "framework": "react",
            "tags": ["button", "gradient"],
            "is_public": True,
            "views": 0,
            "downloads": 0,
            "copies": 0,
            "likes": 0,
        }
        values.update(fields)
        component = Component(author_id=author_id, **values)
        async with session_factory() as session:
            session.add(component)
            await session.commit()
        return component

    return _make


@pytest.fixture
def token_for(settings):
    """Mint a bearer header the way the identity provider would."""

    def _headers(user_id: str, **claims) -> dict:
        token = JWTManager.create_access_token(user_id, claims, settings=settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture(scope="function")
async def test_user(make_user) -> User:
    return await make_user("uid_author", display_name="Ada", username="ada")


@pytest.fixture
def auth_headers(test_user: User, token_for) -> dict:
    return token_for(test_user.id, email=test_user.email)
