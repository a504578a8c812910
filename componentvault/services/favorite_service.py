"""
Favorite Service

컴포넌트 즐겨찾기 관리 서비스
"""

import logging
from typing import List

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.activity import ActivityType, TargetType
from componentvault.models.component import Component
from componentvault.models.favorite import Favorite
from componentvault.services.activity_service import ActivityService
from componentvault.services.component_service import parse_component_id
from componentvault.services.counters import decrement_clamped, increment
from componentvault.utils.exceptions import ComponentNotFoundException

logger = logging.getLogger(__name__)


class FavoriteService:
    """즐겨찾기 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_favorites(self, user_id: str) -> List[Favorite]:
        """사용자 즐겨찾기 목록 (최신순)"""
        result = await self.db.execute(
            select(Favorite)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc())
        )
        return list(result.scalars().all())

    async def is_favorited(self, user_id: str, component_id: str) -> bool:
        try:
            key = parse_component_id(component_id)
        except ComponentNotFoundException:
            return False

        result = await self.db.execute(
            select(Favorite.id).where(
                and_(Favorite.user_id == user_id, Favorite.component_id == key)
            )
        )
        return result.first() is not None

    async def add_favorite(self, user_id: str, component_id: str) -> bool:
        """
        즐겨찾기 추가 (멱등)

        이미 즐겨찾기한 경우(동시 요청이 UNIQUE 제약에 걸린 경우 포함) 아무것도 변경하지 않습니다.
        새로 추가된 경우에만 컴포넌트 likes +1, like 활동을 기록합니다.

        Returns:
            새로 추가되었는지 여부

        Raises:
            ComponentNotFoundException: 컴포넌트가 없는 경우
        """
        key = parse_component_id(component_id)
        title_result = await self.db.execute(
            select(Component.title).where(Component.id == key)
        )
        title = title_result.scalar_one_or_none()
        if title is None:
            raise ComponentNotFoundException(component_id)

        if await self.is_favorited(user_id, component_id):
            return False

        try:
            async with self.db.begin_nested():
                self.db.add(Favorite(user_id=user_id, component_id=key))
        except IntegrityError:
            logger.info(
                "Concurrent duplicate favorite ignored",
                extra={"user_id": user_id, "component_id": str(key)},
            )
            return False

        await increment(self.db, Component, key, "likes")
        await ActivityService(self.db).record(
            user_id,
            ActivityType.LIKE,
            target_id=str(key),
            target_type=TargetType.COMPONENT,
            description=f"Liked {title}",
        )
        return True

    async def remove_favorite(self, user_id: str, component_id: str) -> bool:
        """
        즐겨찾기 제거

        조인 레코드가 실제로 삭제된 경우에만 likes -1 (0에서 멈춤)

        Returns:
            삭제되었는지 여부
        """
        try:
            key = parse_component_id(component_id)
        except ComponentNotFoundException:
            return False

        result = await self.db.execute(
            delete(Favorite).where(
                and_(Favorite.user_id == user_id, Favorite.component_id == key)
            )
        )
        if not result.rowcount:
            return False

        await decrement_clamped(self.db, Component, key, "likes")
        return True
