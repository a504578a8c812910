"""
활동(Activity) 모델

사용자별 추가 전용 이벤트 로그. 프로필 활동 피드에 사용됩니다.
"""

from enum import Enum
from sqlalchemy import Column, String, Text, ForeignKey, DateTime, Index, Uuid
import uuid

from .base import Base
from componentvault.utils.timeutils import utcnow


class ActivityType(str, Enum):
    """활동 종류"""

    UPLOAD = "upload"
    LIKE = "like"
    COMMENT = "comment"
    COLLECTION = "collection"
    FOLLOW = "follow"


class TargetType(str, Enum):
    """활동 대상 종류"""

    COMPONENT = "component"
    USER = "user"
    COLLECTION = "collection"


class Activity(Base):
    """활동 로그 모델"""

    __tablename__ = "activities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type = Column(String(20), nullable=False)
    target_id = Column(String(128), nullable=True)
    target_type = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("idx_activities_user_created", "user_id", "created_at"),)

    def __repr__(self):
        return f"<Activity(id={self.id}, user_id={self.user_id}, type={self.type})>"
