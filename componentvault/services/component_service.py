"""
컴포넌트 서비스

컴포넌트 목록/조회/등록/수정/삭제와 지표 액션(view, download, copy, like, unlike)을 처리합니다.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from componentvault.models.activity import ActivityType, TargetType
from componentvault.models.collection import CollectionComponent
from componentvault.models.comment import Comment
from componentvault.models.component import Component, SourceType
from componentvault.models.favorite import Favorite
from componentvault.models.review import Review
from componentvault.models.review_vote import ReviewVote
from componentvault.models.user import User
from componentvault.search.changes import (
    COLLECTIONS_INDEX,
    ChangeOperation,
    record_change,
)
from componentvault.services.activity_service import ActivityService
from componentvault.services.counters import decrement_clamped, increment
from componentvault.utils.exceptions import (
    ComponentNotFoundException,
    ValidationException,
)
from componentvault.utils.prometheus_metrics import record_component_metric

logger = logging.getLogger(__name__)


ORDERABLE_FIELDS = {
    "created_at": Component.created_at,
    "updated_at": Component.updated_at,
    "likes": Component.likes,
    "views": Component.views,
    "downloads": Component.downloads,
    "copies": Component.copies,
    "title": Component.title,
}

METRIC_FIELDS = {
    "view": "views",
    "download": "downloads",
    "copy": "copies",
    "like": "likes",
}

# 작성자만 수정 가능한 필드 (카운터/소유자 필드는 제외)
EDITABLE_FIELDS = {
    "title",
    "description",
    "code",
    "preview_image",
    "thumbnail_image",
    "category",
    "framework",
    "language",
    "styling",
    "source_type",
    "source_url",
    "tags",
    "dependencies",
    "version",
    "is_public",
    "accessibility_score",
}


def parse_component_id(component_id: str) -> uuid.UUID:
    """
    문자열 ID → UUID

    Raises:
        ComponentNotFoundException: 형식이 잘못된 ID (존재할 수 없는 레코드)
    """
    try:
        return uuid.UUID(str(component_id))
    except ValueError:
        raise ComponentNotFoundException(component_id)


class ComponentService:
    """컴포넌트 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_components(
        self,
        category: Optional[str] = None,
        framework: Optional[str] = None,
        source_type: Optional[str] = None,
        author_id: Optional[str] = None,
        is_public: Optional[bool] = True,
        order_by: str = "created_at",
        order: str = "desc",
        limit: int = 20,
    ) -> List[Component]:
        """
        컴포넌트 목록 조회

        Args:
            is_public: True면 공개 컴포넌트만, False면 비공개만, None이면 전체 (작성자 본인 조회용)
            order_by: 정렬 필드 (created_at, likes, views, downloads, copies, title)
            order: asc 또는 desc
        """
        query = select(Component)

        if category:
            query = query.where(Component.category == category)
        if framework:
            query = query.where(Component.framework == framework)
        if source_type:
            query = query.where(Component.source_type == source_type)
        if author_id:
            query = query.where(Component.author_id == author_id)
        if is_public is not None:
            query = query.where(Component.is_public == is_public)

        column = ORDERABLE_FIELDS.get(order_by)
        if column is None:
            raise ValidationException(
                f"Invalid order_by: {order_by}", field="order_by"
            )
        ordering = column.asc() if order == "asc" else column.desc()
        query = query.order_by(ordering, Component.id).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_component(self, component_id: str) -> Component:
        """
        컴포넌트 조회

        Raises:
            ComponentNotFoundException: 컴포넌트가 없는 경우
        """
        component = await self.db.get(Component, parse_component_id(component_id))
        if component is None:
            raise ComponentNotFoundException(component_id)
        return component

    async def record_view(self, component: Component) -> None:
        """
        조회수 증가 (best-effort)

        실패해도 조회 응답은 정상 반환합니다.
        """
        try:
            async with self.db.begin_nested():
                await increment(self.db, Component, component.id, "views")
        except SQLAlchemyError as e:
            logger.warning(f"[SKIP] Failed to increment views for {component.id}: {e}")
            return

        # 응답에 반영 (dirty 표시 없이)
        set_committed_value(component, "views", (component.views or 0) + 1)

    async def create_component(self, author: User, data: Dict[str, Any]) -> Component:
        """
        컴포넌트 등록

        카운터는 0에서 시작하며, 작성자의 total_components가 1 증가하고 upload 활동이 기록됩니다.

        Args:
            author: 작성자 (토큰의 사용자)
            data: 요청 본문 (title, description, code, preview_image 필수)
        """
        component = Component(
            title=data["title"],
            description=data["description"],
            code=data["code"],
            preview_image=data["preview_image"],
            thumbnail_image=data.get("thumbnail_image"),
            category=data.get("category"),
            framework=data.get("framework"),
            language=data.get("language"),
            styling=data.get("styling"),
            source_type=data.get("source_type") or SourceType.UPLOAD.value,
            source_url=data.get("source_url"),
            tags=data.get("tags") or [],
            dependencies=data.get("dependencies") or [],
            version=data.get("version") or "1.0.0",
            accessibility_score=data.get("accessibility_score"),
            author_id=author.id,
            author_name=data.get("author_name")
            or author.display_name
            or author.username,
            author_avatar=data.get("author_avatar") or author.photo_url,
            is_public=data.get("is_public", True),
            is_featured=False,
            views=0,
            downloads=0,
            copies=0,
            likes=0,
        )
        self.db.add(component)
        await self.db.flush()

        await increment(self.db, User, author.id, "total_components")
        await ActivityService(self.db).record(
            author.id,
            ActivityType.UPLOAD,
            target_id=str(component.id),
            target_type=TargetType.COMPONENT,
            description=f"Uploaded {component.title}",
        )

        logger.info(
            "Component created",
            extra={"component_id": str(component.id), "author_id": author.id},
        )
        return component

    async def update_component(
        self, component: Component, changes: Dict[str, Any]
    ) -> Component:
        """부분 수정 (허용된 필드만 반영)"""
        for field, value in changes.items():
            if field in EDITABLE_FIELDS:
                setattr(component, field, value)

        await self.db.flush()
        return component

    async def delete_component(self, component: Component) -> None:
        """
        컴포넌트 삭제

        즐겨찾기, 리뷰(투표 포함), 댓글, 컬렉션 멤버십을 함께 정리하고
        작성자의 total_components를 1 감소시킵니다 (0에서 멈춤).
        """
        component_id = component.id
        author_id = component.author_id

        review_ids = select(Review.id).where(Review.component_id == component_id)
        await self.db.execute(
            delete(ReviewVote).where(ReviewVote.review_id.in_(review_ids))
        )
        await self.db.execute(delete(Review).where(Review.component_id == component_id))
        await self.db.execute(
            delete(Favorite).where(Favorite.component_id == component_id)
        )
        await self.db.execute(delete(Comment).where(Comment.component_id == component_id))

        memberships = await self.db.execute(
            select(CollectionComponent.collection_id).where(
                CollectionComponent.component_id == component_id
            )
        )
        for collection_id in memberships.scalars().all():
            record_change(self.db, COLLECTIONS_INDEX, collection_id, ChangeOperation.UPDATE)
        await self.db.execute(
            delete(CollectionComponent)
            .where(CollectionComponent.component_id == component_id)
            .execution_options(synchronize_session=False)
        )

        await self.db.delete(component)
        await self.db.flush()

        await decrement_clamped(self.db, User, author_id, "total_components")

    async def apply_metric(self, component_id: str, action: str) -> None:
        """
        지표 액션 적용

        - view/download/copy/like: 해당 카운터 +1 (컴포넌트가 없으면 404)
        - unlike: likes -1, 0에서 멈춤 (컴포넌트가 없으면 아무것도 하지 않음)

        Raises:
            ValidationException: 알 수 없는 액션
            ComponentNotFoundException: 컴포넌트가 없는 경우 (unlike 제외)
        """
        if action == "unlike":
            try:
                key = uuid.UUID(str(component_id))
            except ValueError:
                return
            await decrement_clamped(self.db, Component, key, "likes")
            record_component_metric(action)
            return

        field = METRIC_FIELDS.get(action)
        if field is None:
            raise ValidationException(f"Invalid action: {action}", field="action")

        updated = await increment(
            self.db, Component, parse_component_id(component_id), field
        )
        if not updated:
            raise ComponentNotFoundException(component_id)
        record_component_metric(action)
