"""
데이터베이스 모델 패키지

이 패키지는 모든 SQLAlchemy 모델을 관리합니다.
새로운 모델을 추가할 때는 이 파일에서 import하여 Alembic이 자동으로 감지할 수 있도록 합니다.
"""

from .base import Base, TimestampMixin, get_db, init_db, drop_db
from .user import User
from .component import Component, SourceType
from .collection import Collection, CollectionComponent
from .favorite import Favorite
from .follow import Follow
from .review import Review
from .review_vote import ReviewVote, VoteAction
from .comment import Comment
from .activity import Activity, ActivityType, TargetType

__all__ = [
    "Base",
    "TimestampMixin",
    "get_db",
    "init_db",
    "drop_db",
    "User",
    "Component",
    "SourceType",
    "Collection",
    "CollectionComponent",
    "Favorite",
    "Follow",
    "Review",
    "ReviewVote",
    "VoteAction",
    "Comment",
    "Activity",
    "ActivityType",
    "TargetType",
]

# 검색 인덱스 변경 수집 리스너 등록 (Session 이벤트)
import componentvault.search.changes  # noqa: E402,F401
