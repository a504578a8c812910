"""
Favorite Model

사용자가 즐겨찾기한 컴포넌트 (조인 엔티티)
"""

from sqlalchemy import Column, String, ForeignKey, DateTime, UniqueConstraint, Uuid
import uuid

from .base import Base
from componentvault.utils.timeutils import utcnow


class Favorite(Base):
    """
    Favorite 모델

    - 레코드가 존재하면 "즐겨찾기됨"
    - 동일 컴포넌트 중복 추가 불가 (UNIQUE 제약)
    - 컴포넌트 삭제 시 함께 삭제
    """

    __tablename__ = "favorites"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    component_id = Column(
        Uuid,
        ForeignKey("components.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, comment="즐겨찾기 날짜"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "component_id", name="uq_user_component_favorite"),
        {"comment": "사용자 즐겨찾기 (컴포넌트)"},
    )

    def __repr__(self):
        return f"<Favorite(id={self.id}, user_id={self.user_id}, component_id={self.component_id})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "user_id": self.user_id,
            "component_id": str(self.component_id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
