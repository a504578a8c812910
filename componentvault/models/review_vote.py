"""
리뷰 투표 모델

사용자가 리뷰에 "도움돼요"/"도움 안 돼요" 투표한 이력을 관리합니다.
"""

from enum import Enum
from sqlalchemy import Column, String, ForeignKey, PrimaryKeyConstraint, CheckConstraint, Uuid

from componentvault.models.base import Base, TimestampMixin


class VoteAction(str, Enum):
    """투표 종류"""

    HELPFUL = "helpful"
    NOT_HELPFUL = "not_helpful"


class ReviewVote(Base, TimestampMixin):
    """
    리뷰 투표 모델

    중복 투표를 방지하기 위해 (review_id, user_id) 복합 기본 키를 사용합니다.
    """

    __tablename__ = "review_votes"

    review_id = Column(Uuid, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    action = Column(String(20), nullable=False)

    __table_args__ = (
        PrimaryKeyConstraint("review_id", "user_id", name="pk_review_votes"),
        CheckConstraint(
            "action IN ('helpful', 'not_helpful')", name="check_vote_action"
        ),
    )

    def __repr__(self):
        return f"<ReviewVote(review_id={self.review_id}, user_id={self.user_id}, action={self.action})>"
