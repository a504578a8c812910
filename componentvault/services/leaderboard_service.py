"""
리더보드 서비스

사용자와 공개 컴포넌트를 읽어 사용자별 파생 통계를 계산하고,
선택한 지표(contributors, downloads, rated, rising)로 정렬한 순위 목록을 만듭니다.

정렬/집계는 순수 함수로 분리되어 있어 저장소 없이 테스트할 수 있습니다.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.component import Component
from componentvault.models.user import User
from componentvault.utils.exceptions import DatabaseException
from componentvault.utils.timeutils import ensure_aware, utcnow

logger = logging.getLogger(__name__)


RANKING_TYPES = ("contributors", "downloads", "rated", "rising")

# 기간별 집계 구간 (alltime은 제한 없음)
PERIOD_WINDOWS = {
    "year": timedelta(days=365),
    "month": timedelta(days=30),
    "week": timedelta(days=7),
}

RISING_WINDOW_DAYS = 90


def component_downloads(component: Dict[str, Any]) -> int:
    """downloads가 없거나 0이면 레거시 copies로 대체"""
    return component.get("downloads") or component.get("copies") or 0


def component_rating(component: Dict[str, Any]) -> float:
    """레거시 stats.rating 우선, 없으면 flat rating, 둘 다 없으면 0"""
    return (component.get("stats") or {}).get("rating") or component.get("rating") or 0


def round1(value: float) -> float:
    """소수점 첫째 자리 반올림 (half-up)"""
    return math.floor(value * 10 + 0.5) / 10


def _display_username(user: Dict[str, Any]) -> str:
    if user.get("username"):
        return user["username"]
    email = user.get("email")
    if email:
        return email.split("@")[0] or "anonymous"
    return "anonymous"


def build_contributor_stats(
    users: Iterable[Dict[str, Any]],
    components: Iterable[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    사용자별 파생 통계 계산

    컴포넌트가 하나도 없는 사용자는 제외됩니다.

    Args:
        users: {id, username, email, display_name, photo_url, badges, created_at}
        components: {author_id, downloads, copies, likes, rating, stats}
    """
    by_author: Dict[str, List[Dict[str, Any]]] = {}
    for component in components:
        by_author.setdefault(component.get("author_id"), []).append(component)

    stats = []
    for user in users:
        owned = by_author.get(user["id"], [])
        if not owned:
            continue

        ratings_sum = sum(component_rating(c) for c in owned)
        stats.append(
            {
                "id": user["id"],
                "username": _display_username(user),
                "name": user.get("display_name") or user.get("username") or "Anonymous",
                "avatar": user.get("photo_url") or None,
                "email": user.get("email") or "",
                "components": len(owned),
                "downloads": sum(component_downloads(c) for c in owned),
                "likes": sum(c.get("likes") or 0 for c in owned),
                "rating": round1(ratings_sum / len(owned)),
                "badges": list(user.get("badges") or []),
                "created_at": user.get("created_at"),
            }
        )
    return stats


def rising_score(entry: Dict[str, Any]) -> float:
    return entry["components"] * 10 + entry["downloads"] / 100 + entry["rating"] * 5


def _joined_recently(entry: Dict[str, Any], now: datetime) -> bool:
    created_at = entry.get("created_at")
    if created_at is None:
        return False
    days_since_joined = (now - ensure_aware(created_at)).total_seconds() / 86400
    return days_since_joined <= RISING_WINDOW_DAYS


def change_indicator(index: int) -> str:
    """순위 위치 기반 표시용 값 (추세 의미 없음)"""
    if index < 3:
        return "up"
    if index < 7:
        return "same"
    return "down"


def rank_contributors(
    stats: List[Dict[str, Any]],
    ranking_type: str = "contributors",
    limit: int = 10,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    순위 목록 생성

    모든 정렬은 안정 정렬(내림차순)이며, 알 수 없는 ranking_type은 contributors로 처리합니다.
    """
    now = ensure_aware(now or utcnow())

    if ranking_type == "downloads":
        ordered = sorted(stats, key=lambda s: s["downloads"], reverse=True)
    elif ranking_type == "rated":
        ordered = sorted(stats, key=lambda s: s["rating"], reverse=True)
    elif ranking_type == "rising":
        recent = [s for s in stats if _joined_recently(s, now)]
        ordered = sorted(recent, key=rising_score, reverse=True)
    else:
        ordered = sorted(
            stats,
            key=lambda s: (s["components"], s["downloads"], s["rating"]),
            reverse=True,
        )

    return [
        {**entry, "rank": index + 1, "change": change_indicator(index)}
        for index, entry in enumerate(ordered[:limit])
    ]


class LeaderboardService:
    """리더보드 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def _load_users(self) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(
                User.id,
                User.username,
                User.email,
                User.display_name,
                User.photo_url,
                User.badges,
                User.created_at,
            )
        )
        return [dict(row._mapping) for row in result]

    async def _load_public_components(
        self, since: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        query = select(
            Component.author_id,
            Component.downloads,
            Component.copies,
            Component.likes,
            Component.rating,
            Component.stats,
        ).where(Component.is_public.is_(True))
        if since is not None:
            query = query.where(Component.created_at >= since)

        result = await self.db.execute(query)
        return [dict(row._mapping) for row in result]

    async def get_leaderboard(
        self,
        ranking_type: str = "contributors",
        period: str = "alltime",
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        """
        리더보드 조회

        Raises:
            DatabaseException: 저장소 조회 실패 (500)
        """
        now = utcnow()
        window = PERIOD_WINDOWS.get(period)
        since = now - window if window else None

        try:
            users = await self._load_users()
            components = await self._load_public_components(since)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching leaderboard: {e}", exc_info=True)
            raise DatabaseException(
                "Failed to fetch leaderboard",
                operation="leaderboard",
                details={"reason": str(e)},
            )

        stats = build_contributor_stats(users, components)
        ranked = rank_contributors(stats, ranking_type, limit, now)

        for entry in ranked:
            created_at = entry.get("created_at")
            entry["created_at"] = created_at.isoformat() if created_at else None
        return ranked
