"""
컴포넌트(Component) 모델

사용자가 업로드한 UI 컴포넌트 (코드, 미리보기 이미지, 분류, 공개 여부, 지표 카운터).
"""

from enum import Enum
from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Float,
    Boolean,
    ForeignKey,
    CheckConstraint,
    Uuid,
)
import uuid

from .base import Base, TimestampMixin
from .compat import JSONB


class SourceType(str, Enum):
    """컴포넌트 출처"""

    UPLOAD = "upload"
    GITHUB = "github"
    NPM = "npm"
    REMIX = "remix"


class Component(Base, TimestampMixin):
    """
    컴포넌트 모델

    - views/copies/likes는 항상 존재하며 음수가 될 수 없습니다.
    - downloads는 레거시 문서에 없을 수 있어 nullable이며, 집계 시 copies로 대체됩니다.
    - stats는 레거시 중첩 통계(rating 등)로, 평점 집계 시 flat rating보다 우선합니다.
    """

    __tablename__ = "components"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # 내용
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    code = Column(Text, nullable=False)
    preview_image = Column(String(500), nullable=False)
    thumbnail_image = Column(String(500), nullable=True)

    # 분류
    category = Column(String(50), nullable=True, index=True)
    framework = Column(String(50), nullable=True, index=True)
    language = Column(String(50), nullable=True)
    styling = Column(String(50), nullable=True)
    source_type = Column(String(20), nullable=False, default=SourceType.UPLOAD.value)
    source_url = Column(String(500), nullable=True)
    tags = Column(JSONB, nullable=False, default=list)
    dependencies = Column(JSONB, nullable=False, default=list)
    version = Column(String(20), nullable=False, default="1.0.0")
    accessibility_score = Column(Integer, nullable=True)

    # 소유자
    author_id = Column(
        String(128),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_name = Column(String(100), nullable=True)
    author_avatar = Column(String(500), nullable=True)

    # 공개 여부
    is_public = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False)

    # 지표 카운터
    views = Column(Integer, nullable=False, default=0)
    downloads = Column(Integer, nullable=True)
    copies = Column(Integer, nullable=False, default=0)
    likes = Column(Integer, nullable=False, default=0, index=True)
    rating = Column(Float, nullable=True)
    stats = Column(JSONB, nullable=True)

    __table_args__ = (
        CheckConstraint("views >= 0", name="check_views_non_negative"),
        CheckConstraint("copies >= 0", name="check_copies_non_negative"),
        CheckConstraint("likes >= 0", name="check_likes_non_negative"),
    )

    def __repr__(self):
        return f"<Component(id={self.id}, title={self.title}, author_id={self.author_id})>"

    def to_dict(self, include_code: bool = True):
        """딕셔너리로 변환 (API 응답용)"""
        data = {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "preview_image": self.preview_image,
            "thumbnail_image": self.thumbnail_image,
            "category": self.category,
            "framework": self.framework,
            "language": self.language,
            "styling": self.styling,
            "source_type": self.source_type,
            "source_url": self.source_url,
            "tags": self.tags or [],
            "dependencies": self.dependencies or [],
            "version": self.version,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "author_avatar": self.author_avatar,
            "is_public": bool(self.is_public),
            "is_featured": bool(self.is_featured),
            "views": self.views or 0,
            "downloads": self.downloads or 0,
            "copies": self.copies or 0,
            "likes": self.likes or 0,
            "rating": self.rating,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_code:
            data["code"] = self.code
        return data

    def to_document(self):
        """검색 인덱스 projection 입력용 원본 문서 (누락 필드는 None 그대로 유지)"""
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "tags": self.tags,
            "framework": self.framework,
            "downloads": self.downloads,
            "copies": self.copies,
            "likes": self.likes,
            "views": self.views,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "author_avatar": self.author_avatar,
            "thumbnail_image": self.thumbnail_image,
            "preview_image": self.preview_image,
            "accessibility_score": self.accessibility_score,
            "is_public": self.is_public,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
