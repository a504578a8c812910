"""
컬렉션(Collection) 모델

사용자가 컴포넌트를 묶어 둔 이름 있는 목록입니다.
멤버십은 (collection_id, component_id) 복합 기본 키로 저장되므로 중복이 불가능합니다.
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    PrimaryKeyConstraint,
    CheckConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
import uuid

from .base import Base, TimestampMixin
from componentvault.utils.timeutils import utcnow


class Collection(Base, TimestampMixin):
    """컬렉션 모델"""

    __tablename__ = "collections"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    cover_image = Column(String(500), nullable=True)

    user_id = Column(
        String(128),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_name = Column(String(100), nullable=True)

    is_public = Column(Boolean, nullable=False, default=True, index=True)
    likes = Column(Integer, nullable=False, default=0)

    # 멤버십 (항상 함께 로드)
    items = relationship(
        "CollectionComponent",
        back_populates="collection",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CollectionComponent.added_at",
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="check_collection_likes_non_negative"),
    )

    def __repr__(self):
        return f"<Collection(id={self.id}, name={self.name}, user_id={self.user_id})>"

    @property
    def component_ids(self) -> list[str]:
        return [str(item.component_id) for item in self.items]

    def to_dict(self):
        """딕셔너리로 변환 (API 응답용)"""
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "cover_image": self.cover_image,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "is_public": bool(self.is_public),
            "likes": self.likes or 0,
            "component_ids": self.component_ids,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_document(self):
        """검색 인덱스 projection 입력용 원본 문서"""
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "cover_image": self.cover_image,
            "component_ids": self.component_ids,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "is_public": self.is_public,
            "likes": self.likes,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class CollectionComponent(Base):
    """컬렉션 멤버십 (조인 엔티티)"""

    __tablename__ = "collection_components"

    collection_id = Column(
        Uuid, ForeignKey("collections.id", ondelete="CASCADE"), nullable=False
    )
    component_id = Column(
        Uuid,
        ForeignKey("components.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    added_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    collection = relationship("Collection", back_populates="items")

    __table_args__ = (
        PrimaryKeyConstraint("collection_id", "component_id", name="pk_collection_components"),
    )

    def __repr__(self):
        return (
            f"<CollectionComponent(collection_id={self.collection_id}, "
            f"component_id={self.component_id})>"
        )
