"""
플랫폼 통계 서비스

사이트 전체 카운트, 다운로드 합계, 평균 평점, 활동 기여자 수, 인기 컴포넌트 목록을 계산합니다.
조회 실패 시에도 예외 없이 0으로 채운 결과를 반환합니다.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.collection import Collection
from componentvault.models.component import Component
from componentvault.models.user import User
from componentvault.services.leaderboard_service import (
    component_downloads,
    component_rating,
    round1,
)

logger = logging.getLogger(__name__)

TRENDING_LIMIT = 6


def empty_platform_stats() -> Dict[str, Any]:
    return {
        "total_components": 0,
        "total_users": 0,
        "total_collections": 0,
        "public_collections": 0,
        "total_downloads": 0,
        "avg_rating": 0,
        "active_users": 0,
        "total_contributors": 0,
        "trending": [],
    }


def summarize(stats: Dict[str, Any]) -> Dict[str, Any]:
    """리더보드 요약용 필드만 선택"""
    return {
        "total_contributors": stats["total_contributors"],
        "total_components": stats["total_components"],
        "total_downloads": stats["total_downloads"],
        "avg_rating": stats["avg_rating"],
        "active_users": stats["active_users"],
        "total_users": stats["total_users"],
        "total_collections": stats["total_collections"],
    }


def trending_entry(component: Component) -> Dict[str, Any]:
    return {
        "id": str(component.id),
        "name": component.title or "Untitled",
        "likes": component.likes or 0,
        "views": component.views or 0,
        "downloads": component.downloads or 0,
        "thumbnail": component.thumbnail_image or component.preview_image or "",
        "category": component.category or "other",
        "framework": component.framework or "react",
    }


class StatsService:
    """플랫폼 통계 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def _count(self, query) -> int:
        result = await self.db.execute(query)
        return result.scalar_one() or 0

    async def _trending(self) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(Component)
            .where(Component.is_public.is_(True))
            .order_by(Component.likes.desc(), Component.id)
            .limit(TRENDING_LIMIT)
        )
        return [trending_entry(component) for component in result.scalars()]

    async def _compute(self) -> Dict[str, Any]:
        total_components = await self._count(
            select(func.count(Component.id)).where(Component.is_public.is_(True))
        )
        total_users = await self._count(select(func.count(User.id)))
        total_collections = await self._count(select(func.count(Collection.id)))
        public_collections = await self._count(
            select(func.count(Collection.id)).where(Collection.is_public.is_(True))
        )

        # 레코드별 대체 규칙이 필요한 값만 전체 조회
        result = await self.db.execute(
            select(
                Component.author_id,
                Component.downloads,
                Component.copies,
                Component.rating,
                Component.stats,
            ).where(Component.is_public.is_(True))
        )
        components = [dict(row._mapping) for row in result]

        total_downloads = sum(component_downloads(c) for c in components)
        ratings = [r for r in (component_rating(c) for c in components) if r > 0]
        avg_rating = round1(sum(ratings) / len(ratings)) if ratings else 0
        contributors = {c["author_id"] for c in components if c["author_id"]}

        return {
            "total_components": total_components,
            "total_users": total_users,
            "total_collections": total_collections,
            "public_collections": public_collections,
            "total_downloads": total_downloads,
            "avg_rating": avg_rating,
            "active_users": len(contributors),
            "total_contributors": len(contributors),
            "trending": await self._trending(),
        }

    async def get_platform_stats(self) -> Dict[str, Any]:
        """
        플랫폼 통계

        어떤 오류가 발생해도 0으로 채운 결과를 반환합니다 (로그만 기록).
        """
        try:
            return await self._compute()
        except Exception as e:
            logger.error(f"Error fetching statistics: {e}", exc_info=True)
            try:
                await self.db.rollback()
            except SQLAlchemyError as rollback_error:
                logger.error(f"Rollback after statistics failure failed: {rollback_error}")
            return empty_platform_stats()

    async def get_summary(self) -> Dict[str, Any]:
        return summarize(await self.get_platform_stats())
