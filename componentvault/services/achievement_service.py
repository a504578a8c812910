"""
업적 서비스

고정된 업적 정의 테이블(정의 + 판정 함수)을 사용자 통계 스냅샷에 적용합니다.
응답에는 정의만 포함되며 판정 함수는 직렬화되지 않습니다.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.component import Component
from componentvault.models.user import User
from componentvault.services.leaderboard_service import component_downloads
from componentvault.utils.timeutils import ensure_aware, utcnow


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    icon: str
    color: str


@dataclass(frozen=True)
class StatsSnapshot:
    """업적 판정용 사용자 통계"""

    components: int = 0
    downloads: int = 0
    views: int = 0
    favorites: int = 0
    followers: int = 0
    joined_at: Optional[datetime] = None
    now: Optional[datetime] = None

    @property
    def account_age_days(self) -> float:
        now = ensure_aware(self.now or utcnow())
        # 가입일을 모르면 "지금" 가입한 것으로 간주
        joined = ensure_aware(self.joined_at) if self.joined_at else now
        return (now - joined).total_seconds() / 86400


@dataclass(frozen=True)
class AchievementRule:
    achievement: Achievement
    predicate: Callable[[StatsSnapshot], bool]


ACHIEVEMENT_RULES: List[AchievementRule] = [
    AchievementRule(
        Achievement(
            "early_adopter",
            "Early Adopter",
            "Joined in the first month",
            "Award",
            "text-purple-500",
        ),
        # 30일 = 1개월
        lambda s: s.account_age_days / 30 >= 1,
    ),
    AchievementRule(
        Achievement(
            "first_component",
            "First Component",
            "Published your first component",
            "Package",
            "text-blue-500",
        ),
        lambda s: s.components >= 1,
    ),
    AchievementRule(
        Achievement(
            "popular_creator",
            "Popular Creator",
            "Reached 1,000 downloads",
            "TrendingUp",
            "text-green-500",
        ),
        lambda s: s.downloads >= 1000,
    ),
    AchievementRule(
        Achievement(
            "top_contributor",
            "Top Contributor",
            "Published 10+ components",
            "Star",
            "text-yellow-500",
        ),
        lambda s: s.components >= 10,
    ),
    AchievementRule(
        Achievement(
            "community_favorite",
            "Community Favorite",
            "Received 100+ favorites",
            "Heart",
            "text-red-500",
        ),
        lambda s: s.favorites >= 100,
    ),
    AchievementRule(
        Achievement(
            "trending_creator",
            "Trending Creator",
            "Reached 10,000 views",
            "Eye",
            "text-blue-600",
        ),
        lambda s: s.views >= 10000,
    ),
    AchievementRule(
        Achievement(
            "influencer",
            "Influencer",
            "Gained 100+ followers",
            "Users",
            "text-indigo-500",
        ),
        lambda s: s.followers >= 100,
    ),
    AchievementRule(
        Achievement(
            "prolific_creator",
            "Prolific Creator",
            "Published 25+ components",
            "Zap",
            "text-orange-500",
        ),
        lambda s: s.components >= 25,
    ),
]


def evaluate_achievements(snapshot: StatsSnapshot) -> List[Dict[str, Any]]:
    """판정 함수를 만족하는 업적 정의 목록 (테이블 순서 유지)"""
    return [
        asdict(rule.achievement)
        for rule in ACHIEVEMENT_RULES
        if rule.predicate(snapshot)
    ]


class AchievementService:
    """업적 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def build_snapshot(self, user: User) -> StatsSnapshot:
        """사용자의 모든 컴포넌트(공개/비공개)로 통계 스냅샷 생성"""
        result = await self.db.execute(
            select(
                Component.downloads,
                Component.copies,
                Component.views,
                Component.likes,
            ).where(Component.author_id == user.id)
        )
        components = [dict(row._mapping) for row in result]

        return StatsSnapshot(
            components=len(components),
            downloads=sum(component_downloads(c) for c in components),
            views=sum(c["views"] or 0 for c in components),
            favorites=sum(c["likes"] or 0 for c in components),
            followers=user.followers or 0,
            joined_at=user.created_at,
            now=utcnow(),
        )

    async def get_achievements(self, user: User) -> List[Dict[str, Any]]:
        return evaluate_achievements(await self.build_snapshot(user))
