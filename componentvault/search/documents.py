"""
검색 대상 레코드 로드

인덱스 이름을 모델에 매핑하고, 동기화 시점의 현재 상태를 저장소에서 다시 읽습니다.
"""

import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.collection import Collection
from componentvault.models.component import Component
from componentvault.models.user import User
from componentvault.search.changes import (
    COLLECTIONS_INDEX,
    COMPONENTS_INDEX,
    USERS_INDEX,
)

SEARCHABLE_MODELS = {
    COMPONENTS_INDEX: Component,
    USERS_INDEX: User,
    COLLECTIONS_INDEX: Collection,
}


def _coerce_id(index: str, object_id: str):
    # users는 문자열 ID, 나머지는 UUID 기본 키
    if index == USERS_INDEX:
        return str(object_id)
    return uuid.UUID(str(object_id))


async def load_document(
    session: AsyncSession, index: str, object_id: str
) -> Optional[Dict[str, Any]]:
    """
    레코드의 현재 상태를 문서로 로드

    Returns:
        to_document() 결과, 레코드가 없거나 ID 형식이 잘못되면 None
    """
    model = SEARCHABLE_MODELS[index]
    try:
        key = _coerce_id(index, object_id)
    except ValueError:
        return None

    result = await session.execute(
        select(model)
        .where(model.id == key)
        .execution_options(populate_existing=True)
    )
    record = result.scalar_one_or_none()
    if record is None:
        return None
    return record.to_document()


async def load_all_documents(
    session: AsyncSession, index: str
) -> List[Tuple[str, Dict[str, Any]]]:
    """컬렉션 전체를 (ID, 문서) 목록으로 로드"""
    model = SEARCHABLE_MODELS[index]
    result = await session.execute(
        select(model).execution_options(populate_existing=True)
    )
    return [(str(record.id), record.to_document()) for record in result.scalars()]
