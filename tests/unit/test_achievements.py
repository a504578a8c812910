"""
[OK] Unit Tests: Achievement evaluation
"""

from datetime import datetime, timedelta, timezone

from componentvault.services.achievement_service import (
    ACHIEVEMENT_RULES,
    StatsSnapshot,
    evaluate_achievements,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _ids(snapshot):
    return [a["id"] for a in evaluate_achievements(snapshot)]


class TestAchievements:
    """업적 판정"""

    def test_new_account_without_activity_has_nothing(self):
        assert _ids(StatsSnapshot(joined_at=NOW, now=NOW)) == []

    def test_unknown_join_date_counts_as_now(self):
        assert "early_adopter" not in _ids(StatsSnapshot(joined_at=None, now=NOW))

    def test_early_adopter_after_thirty_days(self):
        assert "early_adopter" not in _ids(
            StatsSnapshot(joined_at=NOW - timedelta(days=29), now=NOW)
        )
        assert "early_adopter" in _ids(
            StatsSnapshot(joined_at=NOW - timedelta(days=30), now=NOW)
        )

    def test_naive_join_date_is_treated_as_utc(self):
        joined = (NOW - timedelta(days=45)).replace(tzinfo=None)
        assert "early_adopter" in _ids(StatsSnapshot(joined_at=joined, now=NOW))

    def test_thresholds(self):
        snapshot = StatsSnapshot(
            components=25,
            downloads=1000,
            views=10000,
            favorites=100,
            followers=100,
            joined_at=NOW,
            now=NOW,
        )
        assert _ids(snapshot) == [
            "first_component",
            "popular_creator",
            "top_contributor",
            "community_favorite",
            "trending_creator",
            "influencer",
            "prolific_creator",
        ]

    def test_just_below_thresholds(self):
        snapshot = StatsSnapshot(
            components=9,
            downloads=999,
            views=9999,
            favorites=99,
            followers=99,
            joined_at=NOW,
            now=NOW,
        )
        assert _ids(snapshot) == ["first_component"]

    def test_definitions_only_are_serialized(self):
        result = evaluate_achievements(StatsSnapshot(components=1, joined_at=NOW, now=NOW))
        assert result == [
            {
                "id": "first_component",
                "name": "First Component",
                "description": "Published your first component",
                "icon": "Package",
                "color": "text-blue-500",
            }
        ]

    def test_table_order_is_fixed(self):
        assert [rule.achievement.id for rule in ACHIEVEMENT_RULES] == [
            "early_adopter",
            "first_component",
            "popular_creator",
            "top_contributor",
            "community_favorite",
            "trending_creator",
            "influencer",
            "prolific_creator",
        ]
