"""
리뷰 모델

컴포넌트에 대한 별점과 코멘트를 관리합니다.
"""

from sqlalchemy import (
    Column,
    String,
    Integer,
    Text,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
    Uuid,
)
import uuid

from componentvault.models.base import Base, TimestampMixin


class Review(Base, TimestampMixin):
    """
    리뷰 모델

    사용자당 컴포넌트당 하나의 리뷰만 작성할 수 있습니다.
    도움돼요/도움 안 돼요 투표 수는 ReviewVote와 함께 증가합니다.
    """

    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    component_id = Column(
        Uuid,
        ForeignKey("components.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        String(128),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_name = Column(String(100), nullable=False)
    user_avatar = Column(String(500), nullable=True)

    rating = Column(Integer, nullable=False)  # 1-5점
    comment = Column(Text, nullable=False, default="")

    helpful = Column(Integer, nullable=False, default=0)
    not_helpful = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
        CheckConstraint("helpful >= 0", name="check_helpful_non_negative"),
        CheckConstraint("not_helpful >= 0", name="check_not_helpful_non_negative"),
        UniqueConstraint("component_id", "user_id", name="uq_review_component_user"),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, user_id={self.user_id}, component_id={self.component_id}, rating={self.rating})>"

    def to_dict(self):
        """딕셔너리로 변환 (API 응답용)"""
        return {
            "id": str(self.id),
            "component_id": str(self.component_id),
            "user_id": self.user_id,
            "user_name": self.user_name,
            "user_avatar": self.user_avatar,
            "rating": self.rating,
            "comment": self.comment or "",
            "helpful": self.helpful or 0,
            "not_helpful": self.not_helpful or 0,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
