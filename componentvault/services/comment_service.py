"""
댓글 서비스
"""

import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.activity import ActivityType, TargetType
from componentvault.models.comment import Comment
from componentvault.models.component import Component
from componentvault.models.user import User
from componentvault.services.activity_service import ActivityService
from componentvault.services.component_service import parse_component_id
from componentvault.utils.exceptions import (
    ComponentNotFoundException,
    NotFoundException,
)


class CommentService:
    """댓글 서비스 (컴포넌트별 평면 목록)"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_comments(self, component_id: str) -> List[Comment]:
        """컴포넌트 댓글 목록 (최신순)"""
        try:
            key = parse_component_id(component_id)
        except ComponentNotFoundException:
            return []

        result = await self.db.execute(
            select(Comment)
            .where(Comment.component_id == key)
            .order_by(Comment.created_at.desc(), Comment.id)
        )
        return list(result.scalars().all())

    async def add_comment(self, user: User, component_id: str, content: str) -> Comment:
        """
        댓글 작성

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

        comment = Comment(
            component_id=key,
            user_id=user.id,
            user_name=user.display_name or user.username or "Anonymous",
            user_avatar=user.photo_url,
            content=content,
            likes=0,
        )
        self.db.add(comment)
        await self.db.flush()

        await ActivityService(self.db).record(
            user.id,
            ActivityType.COMMENT,
            target_id=str(key),
            target_type=TargetType.COMPONENT,
            description=f"Commented on {title}",
        )
        return comment

    async def get_comment(self, comment_id: str) -> Comment:
        try:
            key = uuid.UUID(str(comment_id))
        except ValueError:
            raise NotFoundException(resource="댓글", resource_id=comment_id)

        comment = await self.db.get(Comment, key)
        if comment is None:
            raise NotFoundException(resource="댓글", resource_id=comment_id)
        return comment

    async def delete_comment(self, comment: Comment) -> None:
        await self.db.delete(comment)
        await self.db.flush()
