"""
댓글 모델

컴포넌트별 평면 댓글 목록 (답글 트리는 저장하지 않음)
"""

from sqlalchemy import Column, String, Integer, Text, ForeignKey, Uuid
import uuid

from componentvault.models.base import Base, TimestampMixin


class Comment(Base, TimestampMixin):
    """댓글 모델"""

    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    component_id = Column(
        Uuid,
        ForeignKey("components.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    user_name = Column(String(100), nullable=False)
    user_avatar = Column(String(500), nullable=True)
    content = Column(Text, nullable=False)
    likes = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Comment(id={self.id}, component_id={self.component_id}, user_id={self.user_id})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "component_id": str(self.component_id),
            "user_id": self.user_id,
            "user_name": self.user_name,
            "user_avatar": self.user_avatar,
            "content": self.content,
            "likes": self.likes or 0,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
