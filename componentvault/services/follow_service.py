"""
Follow Service

사용자 팔로우/언팔로우 및 팔로워/팔로잉 카운터 관리
"""

import logging

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.activity import ActivityType, TargetType
from componentvault.models.follow import Follow
from componentvault.models.user import User
from componentvault.services.activity_service import ActivityService
from componentvault.services.counters import decrement_clamped, increment
from componentvault.utils.exceptions import UserNotFoundException, ValidationException

logger = logging.getLogger(__name__)


class FollowService:
    """팔로우 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def is_following(self, follower_id: str, following_id: str) -> bool:
        result = await self.db.execute(
            select(Follow.id).where(
                and_(
                    Follow.follower_id == follower_id,
                    Follow.following_id == following_id,
                )
            )
        )
        return result.first() is not None

    async def follow(self, follower_id: str, following_id: str) -> bool:
        """
        팔로우 (멱등)

        새 관계가 생긴 경우에만 follower의 following +1, 대상의 followers +1

        Returns:
            새로 팔로우했는지 여부

        Raises:
            ValidationException: 자기 자신을 팔로우하려는 경우
            UserNotFoundException: 대상 사용자가 없는 경우
        """
        if follower_id == following_id:
            raise ValidationException(
                "You cannot follow yourself", field="following_id"
            )

        target = await self.db.execute(
            select(User.display_name, User.username).where(User.id == following_id)
        )
        row = target.one_or_none()
        if row is None:
            raise UserNotFoundException(following_id)

        if await self.is_following(follower_id, following_id):
            return False

        try:
            async with self.db.begin_nested():
                self.db.add(Follow(follower_id=follower_id, following_id=following_id))
        except IntegrityError:
            logger.info(
                "Concurrent duplicate follow ignored",
                extra={"follower_id": follower_id, "following_id": following_id},
            )
            return False

        await increment(self.db, User, follower_id, "following")
        await increment(self.db, User, following_id, "followers")
        await ActivityService(self.db).record(
            follower_id,
            ActivityType.FOLLOW,
            target_id=following_id,
            target_type=TargetType.USER,
            description=f"Followed {row.display_name or row.username or 'a creator'}",
        )
        return True

    async def unfollow(self, follower_id: str, following_id: str) -> bool:
        """
        언팔로우

        관계가 실제로 삭제된 경우에만 양쪽 카운터 -1 (0에서 멈춤)
        """
        result = await self.db.execute(
            delete(Follow).where(
                and_(
                    Follow.follower_id == follower_id,
                    Follow.following_id == following_id,
                )
            )
        )
        if not result.rowcount:
            return False

        await decrement_clamped(self.db, User, follower_id, "following")
        await decrement_clamped(self.db, User, following_id, "followers")
        return True
