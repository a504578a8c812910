"""
[OK] Unit Tests: Search index projections
"""

from datetime import datetime, timezone

import pytest

from componentvault.search.projections import (
    project,
    project_collection,
    project_component,
    project_user,
    to_epoch_seconds,
)

NOW = 1_700_000_000


def _assert_no_none(obj):
    for key, value in obj.items():
        assert value is not None, key
        if isinstance(value, dict):
            _assert_no_none(value)


class TestEpochSeconds:
    def test_structured_timestamp_preferred(self):
        assert to_epoch_seconds({"_seconds": 1234, "_nanoseconds": 5}) == 1234
        assert to_epoch_seconds({"seconds": 99}) == 99

    def test_datetime_and_numbers(self):
        value = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert to_epoch_seconds(value) == 1704067200
        assert to_epoch_seconds(datetime(2024, 1, 1)) == 1704067200
        assert to_epoch_seconds(1500.9) == 1500

    def test_missing_falls_back_to_now(self):
        assert to_epoch_seconds(None, now=NOW) == NOW
        assert to_epoch_seconds({"other": 1}, now=NOW) == NOW
        assert to_epoch_seconds(0, now=NOW) == NOW
        assert to_epoch_seconds(True, now=NOW) == NOW


class TestComponentProjection:
    def test_empty_document_gets_defaults(self):
        obj = project_component("c1", {}, now=NOW)

        _assert_no_none(obj)
        assert obj == {
            "objectID": "c1",
            "name": "",
            "description": "",
            "category": "",
            "tags": [],
            "framework": "react",
            "frameworks": [],
            "downloads": 0,
            "likes": 0,
            "favorites": 0,
            "views": 0,
            "author": {},
            "authorId": "",
            "authorName": "",
            "thumbnail": "",
            "accessibilityScore": 0,
            "isPremium": False,
            "isPublished": True,
            "createdAt": NOW,
            "updatedAt": NOW,
        }

    def test_store_document_fields(self):
        doc = {
            "title": "Card",
            "description": "A card",
            "category": "cards",
            "tags": ["card"],
            "framework": "vue",
            "downloads": None,
            "copies": 12,
            "likes": 3,
            "views": 40,
            "author_id": "u1",
            "author_name": "Ada",
            "author_avatar": None,
            "thumbnail_image": None,
            "preview_image": "https://cdn.example.com/card.png",
            "accessibility_score": 90,
            "is_public": False,
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "updated_at": None,
        }
        obj = project_component("c2", doc, now=NOW)

        _assert_no_none(obj)
        assert obj["name"] == "Card"
        assert obj["downloads"] == 12
        assert obj["favorites"] == 3
        assert obj["author"] == {"id": "u1", "name": "Ada"}
        assert obj["thumbnail"] == "https://cdn.example.com/card.png"
        assert obj["isPublished"] is False
        assert obj["createdAt"] == 1704067200
        assert obj["updatedAt"] == NOW


class TestUserAndCollectionProjection:
    def test_user_defaults(self):
        obj = project_user("u1", {"photo_url": "https://x/a.png", "total_components": 3}, now=NOW)

        _assert_no_none(obj)
        assert obj["avatar"] == "https://x/a.png"
        assert obj["componentsCount"] == 3
        assert obj["followersCount"] == 0
        assert obj["isVerified"] is False
        assert obj["createdAt"] == NOW

    def test_collection(self):
        obj = project_collection(
            "k1",
            {
                "name": "Forms",
                "component_ids": ["a", "b"],
                "user_id": "u1",
                "user_name": "Ada",
                "cover_image": None,
                "is_public": None,
            },
            now=NOW,
        )

        _assert_no_none(obj)
        assert obj["componentIds"] == ["a", "b"]
        assert obj["componentsCount"] == 2
        assert obj["authorId"] == "u1"
        assert obj["isPublic"] is True
        assert obj["thumbnail"] == ""

    def test_unknown_index(self):
        with pytest.raises(ValueError):
            project("products", "p1", {})
