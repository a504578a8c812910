"""
Collection Service

컬렉션 생성/조회/수정/삭제 및 멤버십(집합) 관리 서비스
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.activity import ActivityType, TargetType
from componentvault.models.collection import Collection, CollectionComponent
from componentvault.models.component import Component
from componentvault.models.user import User
from componentvault.search.changes import (
    COLLECTIONS_INDEX,
    ChangeOperation,
    record_change,
)
from componentvault.services.activity_service import ActivityService
from componentvault.utils.exceptions import (
    CollectionNotFoundException,
    ComponentNotFoundException,
    ValidationException,
)
from componentvault.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"name", "description", "cover_image", "is_public"}


class CollectionService:
    """컬렉션 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_user_collections(self, user_id: str) -> List[Collection]:
        """사용자 컬렉션 목록 (최신순)"""
        result = await self.db.execute(
            select(Collection)
            .where(Collection.user_id == user_id)
            .order_by(Collection.created_at.desc(), Collection.id)
        )
        return list(result.scalars().all())

    async def get_collection(self, collection_id: str) -> Collection:
        """
        컬렉션 조회

        Raises:
            CollectionNotFoundException: 컬렉션이 없는 경우
        """
        try:
            key = uuid.UUID(str(collection_id))
        except ValueError:
            raise CollectionNotFoundException(collection_id)

        collection = await self.db.get(Collection, key)
        if collection is None:
            raise CollectionNotFoundException(collection_id)
        return collection

    async def create_collection(self, owner: User, data: Dict[str, Any]) -> Collection:
        """
        컬렉션 생성

        멤버십은 빈 집합으로 시작하며 is_public 기본값은 True입니다.
        """
        collection = Collection(
            name=data["name"],
            description=data.get("description") or "",
            cover_image=data.get("cover_image"),
            user_id=owner.id,
            user_name=data.get("user_name") or owner.display_name or owner.username,
            is_public=True if data.get("is_public") is None else data["is_public"],
            likes=0,
        )
        self.db.add(collection)
        await self.db.flush()

        await ActivityService(self.db).record(
            owner.id,
            ActivityType.COLLECTION,
            target_id=str(collection.id),
            target_type=TargetType.COLLECTION,
            description=f"Created collection {collection.name}",
        )
        return collection

    async def update_collection(
        self, collection: Collection, changes: Dict[str, Any]
    ) -> Collection:
        """부분 수정 (허용된 필드만 반영)"""
        for field, value in changes.items():
            if field in EDITABLE_FIELDS:
                setattr(collection, field, value)

        await self.db.flush()
        return collection

    async def delete_collection(self, collection: Collection) -> None:
        """컬렉션 삭제 (멤버십은 cascade로 함께 삭제)"""
        await self.db.delete(collection)
        await self.db.flush()

    @staticmethod
    def _parse_component_ids(component_ids: Iterable[str]) -> List[uuid.UUID]:
        parsed = []
        for component_id in component_ids:
            try:
                parsed.append(uuid.UUID(str(component_id)))
            except ValueError:
                raise ValidationException(
                    f"Invalid component ID: {component_id}", field="component_ids"
                )
        # 요청 내 중복 제거 (순서 유지)
        return list(dict.fromkeys(parsed))

    async def add_components(
        self, collection: Collection, component_ids: Iterable[str]
    ) -> Collection:
        """
        컬렉션에 컴포넌트 추가 (합집합)

        이미 포함된 컴포넌트는 무시하며, 동시 추가로 인한 중복도 PK 제약으로 막힙니다.

        Raises:
            ValidationException: ID 목록이 비었거나 형식이 잘못된 경우
            ComponentNotFoundException: 존재하지 않는 컴포넌트가 포함된 경우
        """
        keys = self._parse_component_ids(component_ids)
        if not keys:
            raise ValidationException(
                "component_ids array is required", field="component_ids"
            )

        found = await self.db.execute(select(Component.id).where(Component.id.in_(keys)))
        existing_components = set(found.scalars().all())
        missing = [key for key in keys if key not in existing_components]
        if missing:
            raise ComponentNotFoundException(str(missing[0]))

        current = set(collection.component_ids)
        added = 0
        for key in keys:
            if str(key) in current:
                continue
            try:
                async with self.db.begin_nested():
                    self.db.add(
                        CollectionComponent(collection_id=collection.id, component_id=key)
                    )
            except IntegrityError:
                continue
            added += 1

        if added:
            collection.updated_at = utcnow()
            await self.db.flush()
        await self.db.refresh(collection, ["items"])

        logger.info(
            "Components added to collection",
            extra={"collection_id": str(collection.id), "added": added},
        )
        return collection

    async def remove_component(
        self, collection: Collection, component_id: str
    ) -> Collection:
        """컬렉션에서 컴포넌트 제거 (포함되어 있지 않으면 변경 없음)"""
        try:
            key = uuid.UUID(str(component_id))
        except ValueError:
            return collection

        result = await self.db.execute(
            delete(CollectionComponent)
            .where(
                and_(
                    CollectionComponent.collection_id == collection.id,
                    CollectionComponent.component_id == key,
                )
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            record_change(
                self.db, COLLECTIONS_INDEX, collection.id, ChangeOperation.UPDATE
            )
            collection.updated_at = utcnow()
            await self.db.flush()

        await self.db.refresh(collection, ["items"])
        return collection
