"""
[OK] Integration Tests: Review API

Review creation, aggregates, rating recompute and helpful votes.
"""

import uuid

import pytest
from httpx import AsyncClient

from componentvault.models.component import Component
from componentvault.models.review import Review


async def _load(session_factory, model, key):
    async with session_factory() as session:
        return await session.get(model, key)


@pytest.mark.asyncio
class TestReviewCreation:
    """리뷰 작성"""

    @pytest.fixture
    async def component(self, test_user, make_component):
        return await make_component(test_user.id, title="Slider")

    @pytest.fixture
    async def reviewers(self, make_user):
        return [
            await make_user("uid_r1", display_name="Reviewer One"),
            await make_user("uid_r2", display_name="Reviewer Two"),
        ]

    async def test_create_review_and_recompute_rating(
        self, async_client: AsyncClient, component, reviewers, token_for, session_factory, publisher
    ):
        first = await async_client.post(
            "/v1/reviews",
            json={"component_id": str(component.id), "rating": 5, "comment": "Great"},
            headers=token_for(reviewers[0].id),
        )
        second = await async_client.post(
            "/v1/reviews",
            json={"component_id": str(component.id), "rating": 2},
            headers=token_for(reviewers[1].id),
        )

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["success"] is True

        review = await _load(session_factory, Review, uuid.UUID(first.json()["review_id"]))
        assert review.user_name == "Reviewer One"
        assert (await _load(session_factory, Component, component.id)).rating == 3.5
        assert ("components", str(component.id), "update") in publisher.keys()

    async def test_duplicate_review_rejected(
        self, async_client: AsyncClient, component, reviewers, token_for
    ):
        payload = {"component_id": str(component.id), "rating": 4}
        headers = token_for(reviewers[0].id)

        assert (await async_client.post("/v1/reviews", json=payload, headers=headers)).status_code == 201
        duplicate = await async_client.post("/v1/reviews", json=payload, headers=headers)

        assert duplicate.status_code == 400
        assert duplicate.json()["error"] == "validation_error"

    @pytest.mark.parametrize("rating", [0, 6])
    async def test_rating_out_of_range(
        self, async_client: AsyncClient, component, auth_headers, rating
    ):
        response = await async_client.post(
            "/v1/reviews",
            json={"component_id": str(component.id), "rating": rating},
            headers=auth_headers,
        )
        assert response.status_code == 400

    async def test_review_missing_component(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/v1/reviews",
            json={"component_id": str(uuid.uuid4()), "rating": 3},
            headers=auth_headers,
        )
        assert response.status_code == 404

    async def test_list_reviews_with_aggregates(
        self, async_client: AsyncClient, component, reviewers, token_for
    ):
        for reviewer, rating in zip(reviewers, (5, 4)):
            await async_client.post(
                "/v1/reviews",
                json={"component_id": str(component.id), "rating": rating},
                headers=token_for(reviewer.id),
            )

        response = await async_client.get(
            "/v1/reviews", params={"component_id": str(component.id)}
        )

        assert response.status_code == 200
        data = response.json()
        assert [r["rating"] for r in data["reviews"]] == [4, 5]
        assert data["aggregates"] == {
            "total_reviews": 2,
            "average_rating": 4.5,
            "rating_breakdown": {"5": 1, "4": 1, "3": 0, "2": 0, "1": 0},
        }

    async def test_list_reviews_requires_component_id(self, async_client: AsyncClient):
        assert (await async_client.get("/v1/reviews")).status_code == 400


@pytest.mark.asyncio
class TestReviewVotes:
    """리뷰 투표"""

    @pytest.fixture
    async def review_id(self, async_client: AsyncClient, test_user, make_component, make_user, token_for):
        component = await make_component(test_user.id)
        reviewer = await make_user("uid_reviewer")
        response = await async_client.post(
            "/v1/reviews",
            json={"component_id": str(component.id), "rating": 4},
            headers=token_for(reviewer.id),
        )
        return response.json()["review_id"]

    async def test_vote_helpful_once(
        self, async_client: AsyncClient, review_id, auth_headers, session_factory
    ):
        first = await async_client.post(
            f"/v1/reviews/{review_id}/vote", json={"action": "helpful"}, headers=auth_headers
        )
        second = await async_client.post(
            f"/v1/reviews/{review_id}/vote", json={"action": "not_helpful"}, headers=auth_headers
        )

        assert first.status_code == 200
        assert second.status_code == 400
        review = await _load(session_factory, Review, uuid.UUID(review_id))
        assert (review.helpful, review.not_helpful) == (1, 0)

    async def test_invalid_vote_action(self, async_client: AsyncClient, review_id, auth_headers):
        response = await async_client.post(
            f"/v1/reviews/{review_id}/vote", json={"action": "love"}, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_vote_missing_review(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            f"/v1/reviews/{uuid.uuid4()}/vote", json={"action": "helpful"}, headers=auth_headers
        )
        assert response.status_code == 404
