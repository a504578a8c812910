"""
원자적 카운터 갱신

모든 카운터 변경은 저장소에서 계산되는 단일 UPDATE 문으로 실행됩니다 (Python 측 read-modify-write 없음).
감소는 0에서 멈추도록 조건식으로 계산하므로 동시 감소가 겹쳐도 음수가 되지 않습니다.
검색 인덱스 대상 모델(Component, User, Collection)은 변경 사항을 함께 기록합니다.
"""

from typing import Any

from sqlalchemy import case, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.collection import Collection
from componentvault.models.component import Component
from componentvault.models.user import User
from componentvault.search.changes import (
    COLLECTIONS_INDEX,
    COMPONENTS_INDEX,
    USERS_INDEX,
    ChangeOperation,
    record_change,
)

_INDEX_BY_MODEL = {
    Component: COMPONENTS_INDEX,
    User: USERS_INDEX,
    Collection: COLLECTIONS_INDEX,
}


def _record(session: AsyncSession, model, record_id: Any) -> None:
    index = _INDEX_BY_MODEL.get(model)
    if index is not None:
        record_change(session, index, record_id, ChangeOperation.UPDATE)


async def increment(
    session: AsyncSession, model, record_id: Any, field: str, amount: int = 1
) -> bool:
    """
    카운터 증가 (UPDATE ... SET field = coalesce(field, 0) + amount)

    Returns:
        레코드가 존재해 갱신되었는지 여부
    """
    column = getattr(model, field)
    result = await session.execute(
        update(model)
        .where(model.id == record_id)
        .values({field: func.coalesce(column, 0) + amount})
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        _record(session, model, record_id)
    return bool(result.rowcount)


async def decrement_clamped(
    session: AsyncSession, model, record_id: Any, field: str
) -> bool:
    """
    카운터 감소, 0 미만으로 내려가지 않음

    UPDATE ... SET field = CASE WHEN coalesce(field, 0) > 0 THEN field - 1 ELSE 0 END
    """
    column = getattr(model, field)
    result = await session.execute(
        update(model)
        .where(model.id == record_id)
        .values(
            {
                field: case(
                    (func.coalesce(column, 0) > 0, column - 1),
                    else_=0,
                )
            }
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        _record(session, model, record_id)
    return bool(result.rowcount)
