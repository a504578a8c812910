"""
검색 대상 레코드 변경 수집

ORM flush에 포함된 Component/User/Collection(멤버십 포함) 생성·수정·삭제와,
서비스 계층이 직접 실행한 원자적 카운터 UPDATE를 세션 단위로 모읍니다.
최상위 트랜잭션이 커밋된 경우에만 "커밋된 변경"으로 옮겨지며, 요청이 끝난 뒤
publish_committed_changes()가 change publisher로 넘깁니다.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence

from sqlalchemy import event
from sqlalchemy.orm import Session

from componentvault.models.collection import Collection, CollectionComponent
from componentvault.models.component import Component
from componentvault.models.user import User

logger = logging.getLogger(__name__)


COMPONENTS_INDEX = "components"
USERS_INDEX = "users"
COLLECTIONS_INDEX = "collections"
SEARCH_INDICES = (COMPONENTS_INDEX, USERS_INDEX, COLLECTIONS_INDEX)

_PENDING_KEY = "search.pending_changes"
_COMMITTED_KEY = "search.committed_changes"
_OUTCOME_KEY = "search.transaction_committed"
_SAVEPOINTS_KEY = "search.savepoint_snapshots"


class ChangeOperation(str, Enum):
    """레코드 변경 종류"""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class DocumentChange:
    """검색 인덱스에 반영할 단일 레코드 변경"""

    index: str
    object_id: str
    operation: ChangeOperation


class ChangePublisher(Protocol):
    async def publish(self, changes: Sequence[DocumentChange]) -> None: ...


def _merge(pending: dict, key: tuple[str, str], operation: ChangeOperation) -> None:
    """같은 레코드에 대한 변경 병합: 삭제는 최종 상태, 생성 후 수정은 생성으로 유지"""
    previous = pending.get(key)
    if previous is ChangeOperation.DELETE:
        return
    if previous is ChangeOperation.CREATE and operation is ChangeOperation.UPDATE:
        return
    pending[key] = operation


def record_change(session, index: str, object_id, operation: ChangeOperation) -> None:
    """
    변경 기록

    session은 Session과 AsyncSession 모두 가능합니다 (둘 다 .info를 공유).
    """
    pending = session.info.setdefault(_PENDING_KEY, {})
    _merge(pending, (index, str(object_id)), operation)


def _target_of(instance) -> Optional[tuple[str, str]]:
    if isinstance(instance, Component):
        return COMPONENTS_INDEX, str(instance.id)
    if isinstance(instance, User):
        return USERS_INDEX, str(instance.id)
    if isinstance(instance, Collection):
        return COLLECTIONS_INDEX, str(instance.id)
    if isinstance(instance, CollectionComponent):
        return COLLECTIONS_INDEX, str(instance.collection_id)
    return None


def _collect(session: Session, instances: Iterable, operation: ChangeOperation) -> None:
    for instance in instances:
        target = _target_of(instance)
        if target is None:
            continue
        # 멤버십 행의 추가/삭제는 소속 컬렉션의 수정
        if isinstance(instance, CollectionComponent):
            record_change(session, target[0], target[1], ChangeOperation.UPDATE)
        else:
            record_change(session, target[0], target[1], operation)


@event.listens_for(Session, "after_flush")
def _collect_flushed_changes(session: Session, flush_context) -> None:
    _collect(session, session.new, ChangeOperation.CREATE)
    _collect(
        session,
        (obj for obj in session.dirty if session.is_modified(obj)),
        ChangeOperation.UPDATE,
    )
    _collect(session, session.deleted, ChangeOperation.DELETE)


@event.listens_for(Session, "after_transaction_create")
def _reset_outcome(session: Session, transaction) -> None:
    if transaction.parent is None:
        session.info[_OUTCOME_KEY] = False
    elif transaction.nested:
        # SAVEPOINT 시작 시점의 변경 목록 보관
        snapshots = session.info.setdefault(_SAVEPOINTS_KEY, {})
        snapshots[transaction] = dict(session.info.get(_PENDING_KEY, {}))


@event.listens_for(Session, "after_soft_rollback")
def _discard_savepoint_changes(session: Session, previous_transaction) -> None:
    if not previous_transaction.nested:
        return
    snapshot = session.info.get(_SAVEPOINTS_KEY, {}).pop(previous_transaction, None)
    if snapshot is not None:
        session.info[_PENDING_KEY] = dict(snapshot)


@event.listens_for(Session, "after_commit")
def _mark_committed(session: Session) -> None:
    session.info[_OUTCOME_KEY] = True


@event.listens_for(Session, "after_rollback")
def _mark_rolled_back(session: Session) -> None:
    session.info[_OUTCOME_KEY] = False


@event.listens_for(Session, "after_transaction_end")
def _settle_changes(session: Session, transaction) -> None:
    # 최상위 트랜잭션의 결과만 반영
    if transaction.parent is not None:
        return

    session.info.pop(_SAVEPOINTS_KEY, None)

    pending = session.info.pop(_PENDING_KEY, {})
    if not session.info.pop(_OUTCOME_KEY, False):
        return

    committed = session.info.setdefault(_COMMITTED_KEY, {})
    for key, operation in pending.items():
        _merge(committed, key, operation)


def drain_committed_changes(session) -> list[DocumentChange]:
    """커밋된 변경을 꺼내고 세션에서 비움"""
    committed = session.info.pop(_COMMITTED_KEY, {})
    return [
        DocumentChange(index=index, object_id=object_id, operation=operation)
        for (index, object_id), operation in committed.items()
    ]


async def publish_committed_changes(session, publisher: Optional[ChangePublisher]) -> None:
    changes = drain_committed_changes(session)
    if not changes or publisher is None:
        return

    logger.debug(
        "Publishing search changes",
        extra={"change_count": len(changes)},
    )
    await publisher.publish(changes)
