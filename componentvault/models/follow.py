"""
Follow Model

사용자 간 팔로우 관계 (조인 엔티티)
"""

from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    DateTime,
    UniqueConstraint,
    CheckConstraint,
    Uuid,
)
import uuid

from .base import Base
from componentvault.utils.timeutils import utcnow


class Follow(Base):
    """
    Follow 모델

    follower_id가 following_id를 팔로우합니다. 자기 자신은 팔로우할 수 없습니다.
    """

    __tablename__ = "follows"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    follower_id = Column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    following_id = Column(
        String(128),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follower_following"),
        CheckConstraint("follower_id != following_id", name="check_no_self_follow"),
    )

    def __repr__(self):
        return f"<Follow(follower_id={self.follower_id}, following_id={self.following_id})>"
