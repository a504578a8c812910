"""
사용자(User) 모델

목적: 컴포넌트를 등록하고 팔로우/즐겨찾기를 하는 크리에이터 계정.
ID는 외부 ID 공급자가 발급한 UID(토큰의 sub 클레임)를 그대로 사용합니다.
"""

from sqlalchemy import Column, String, Text, Integer, Boolean, CheckConstraint

from .base import Base, TimestampMixin
from .compat import JSONB


class User(Base, TimestampMixin):
    """사용자 모델"""

    __tablename__ = "users"

    id = Column(String(128), primary_key=True)
    email = Column(String(255), nullable=True, index=True)
    display_name = Column(String(100), nullable=True)
    username = Column(String(50), nullable=True, unique=True, index=True)
    photo_url = Column(String(500), nullable=True)

    # 프로필
    bio = Column(Text, nullable=True)
    website = Column(String(255), nullable=True)
    location = Column(String(100), nullable=True)
    github = Column(String(100), nullable=True)
    twitter = Column(String(100), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    badges = Column(JSONB, nullable=False, default=list)

    # 카운터 (원자적 증감으로만 변경)
    followers = Column(Integer, nullable=False, default=0)
    following = Column(Integer, nullable=False, default=0)
    total_components = Column(Integer, nullable=False, default=0)
    total_likes = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("followers >= 0", name="check_followers_non_negative"),
        CheckConstraint("following >= 0", name="check_following_non_negative"),
        CheckConstraint(
            "total_components >= 0", name="check_total_components_non_negative"
        ),
    )

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"

    def to_dict(self):
        """딕셔너리로 변환 (API 응답용)"""
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "username": self.username,
            "photo_url": self.photo_url,
            "bio": self.bio,
            "website": self.website,
            "location": self.location,
            "github": self.github,
            "twitter": self.twitter,
            "is_verified": bool(self.is_verified),
            "badges": self.badges or [],
            "followers": self.followers or 0,
            "following": self.following or 0,
            "total_components": self.total_components or 0,
            "total_likes": self.total_likes or 0,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_document(self):
        """검색 인덱스 projection 입력용 원본 문서"""
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "username": self.username,
            "photo_url": self.photo_url,
            "bio": self.bio,
            "location": self.location,
            "website": self.website,
            "is_verified": self.is_verified,
            "followers": self.followers,
            "following": self.following,
            "total_components": self.total_components,
            "created_at": self.created_at,
        }
