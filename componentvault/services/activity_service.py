"""
활동 로그 서비스

업로드, 좋아요, 댓글, 컬렉션, 팔로우 이벤트를 사용자별로 기록하고 프로필 활동 피드를 만듭니다.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.activity import Activity, ActivityType, TargetType
from componentvault.utils.timeutils import format_relative_time

logger = logging.getLogger(__name__)


class ActivityService:
    """활동 로그 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def record(
        self,
        user_id: str,
        activity_type: ActivityType,
        target_id: Optional[str] = None,
        target_type: Optional[TargetType] = None,
        description: Optional[str] = None,
    ) -> bool:
        """
        활동 기록 (best-effort)

        SAVEPOINT 안에서 실행하므로 실패해도 요청 트랜잭션은 그대로 유지됩니다.

        Returns:
            기록 성공 여부
        """
        try:
            async with self.db.begin_nested():
                self.db.add(
                    Activity(
                        user_id=user_id,
                        type=activity_type.value,
                        target_id=str(target_id) if target_id is not None else None,
                        target_type=target_type.value if target_type else None,
                        description=description,
                    )
                )
        except SQLAlchemyError as e:
            logger.warning(
                f"[SKIP] Failed to record {activity_type.value} activity: {e}",
                extra={"user_id": user_id},
            )
            return False
        return True

    async def list_feed(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """
        프로필 활동 피드 (최신순)

        Returns:
            [{id, type, text, description, component_id, created_at, date}]
        """
        result = await self.db.execute(
            select(Activity)
            .where(Activity.user_id == user_id)
            .order_by(Activity.created_at.desc())
            .limit(limit)
        )

        feed = []
        for activity in result.scalars():
            component_id = (
                activity.target_id
                if activity.target_type == TargetType.COMPONENT.value
                else None
            )
            feed.append(
                {
                    "id": str(activity.id),
                    "type": activity.type,
                    "text": activity.description or "Activity",
                    "description": activity.description or "",
                    "component_id": component_id,
                    "created_at": (
                        activity.created_at.isoformat() if activity.created_at else None
                    ),
                    "date": format_relative_time(activity.created_at),
                }
            )
        return feed
