"""
사용자 서비스

사용자 조회, 토큰 클레임 기반 사용자 레코드 생성, 프로필 수정, 프로필 통계를 처리합니다.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.component import Component
from componentvault.models.favorite import Favorite
from componentvault.models.follow import Follow
from componentvault.models.user import User
from componentvault.services.leaderboard_service import component_downloads
from componentvault.utils.exceptions import ConflictException, UserNotFoundException

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "display_name",
    "username",
    "photo_url",
    "bio",
    "website",
    "location",
    "github",
    "twitter",
}


class UserService:
    """사용자 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_user(self, user_id: str) -> User:
        """
        사용자 조회

        Raises:
            UserNotFoundException: 사용자가 없는 경우
        """
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundException(user_id)
        return user

    async def ensure_user(self, claims: Dict[str, Any]) -> tuple[User, bool]:
        """
        토큰 클레임으로 사용자 레코드 생성 (이미 있으면 그대로 반환)

        Returns:
            (사용자, 새로 생성되었는지 여부)
        """
        user_id = claims["sub"]
        user = await self.db.get(User, user_id)
        if user is not None:
            return user, False

        user = User(
            id=user_id,
            email=claims.get("email"),
            display_name=claims.get("name"),
            photo_url=claims.get("picture"),
            is_verified=bool(claims.get("email_verified", False)),
            badges=[],
            followers=0,
            following=0,
            total_components=0,
            total_likes=0,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(user)
        except IntegrityError:
            # 동시 요청이 먼저 생성한 경우
            return await self.get_user(user_id), False

        logger.info("User record created", extra={"user_id": user_id})
        return user, True

    async def update_profile(self, user: User, changes: Dict[str, Any]) -> User:
        """
        프로필 수정

        Raises:
            ConflictException: 이미 사용 중인 username인 경우
        """
        username = changes.get("username")
        if username and username != user.username:
            taken = await self.db.execute(
                select(User.id).where(and_(User.username == username, User.id != user.id))
            )
            if taken.first() is not None:
                raise ConflictException(
                    "Username is already taken", details={"field": "username"}
                )

        for field, value in changes.items():
            if field in EDITABLE_FIELDS:
                setattr(user, field, value)

        try:
            async with self.db.begin_nested():
                await self.db.flush()
        except IntegrityError:
            raise ConflictException(
                "Username is already taken", details={"field": "username"}
            )
        return user

    async def get_profile(self, user: User) -> Dict[str, Any]:
        """
        프로필 + 통계

        Returns:
            {"user": {...}, "stats": {components, downloads, favorites, views, followers, following}}
        """
        result = await self.db.execute(
            select(
                Component.id,
                Component.downloads,
                Component.copies,
                Component.views,
            ).where(Component.author_id == user.id)
        )
        components = [dict(row._mapping) for row in result]
        component_ids = [c["id"] for c in components]

        favorites = 0
        if component_ids:
            favorites_result = await self.db.execute(
                select(func.count(Favorite.id)).where(
                    Favorite.component_id.in_(component_ids)
                )
            )
            favorites = favorites_result.scalar_one() or 0

        followers_result = await self.db.execute(
            select(func.count(Follow.id)).where(Follow.following_id == user.id)
        )
        following_result = await self.db.execute(
            select(func.count(Follow.id)).where(Follow.follower_id == user.id)
        )

        return {
            "user": user.to_dict(),
            "stats": {
                "components": len(components),
                "downloads": sum(component_downloads(c) for c in components),
                "favorites": favorites,
                "views": sum(c["views"] or 0 for c in components),
                "followers": followers_result.scalar_one() or 0,
                "following": following_result.scalar_one() or 0,
            },
        }

    async def list_components(self, user_id: str, limit: int = 10) -> List[Component]:
        """사용자 컴포넌트 (공개/비공개 모두, 최신순)"""
        result = await self.db.execute(
            select(Component)
            .where(Component.author_id == user_id)
            .order_by(Component.created_at.desc(), Component.id)
            .limit(limit)
        )
        return list(result.scalars().all())
