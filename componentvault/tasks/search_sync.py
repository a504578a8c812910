"""
Search Index Sync Tasks for ComponentVault

커밋된 레코드 변경을 검색 인덱스에 반영하는 Celery 작업입니다.
전달 시점의 현재 상태를 다시 읽으므로 중복/순서 뒤바뀐 전달에도 안전합니다.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from componentvault.config import get_settings
from componentvault.models.base import create_engine, create_session_factory
from componentvault.search.changes import ChangeOperation, DocumentChange
from componentvault.search.client import SearchIndexClient
from componentvault.search.synchronizer import SearchIndexSynchronizer
from componentvault.tasks import app
from componentvault.utils.sentry_config import capture_exception_with_context

logger = logging.getLogger(__name__)


async def _sync_document(
    change: DocumentChange,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    client: Optional[SearchIndexClient] = None,
) -> None:
    """
    단일 변경 동기화

    워커 프로세스에서는 엔진/클라이언트를 작업마다 생성하고 정리합니다.
    """
    settings = get_settings()
    engine = None
    owns_client = client is None

    if session_factory is None:
        engine = create_engine(settings)
        session_factory = create_session_factory(engine)
    if client is None:
        client = SearchIndexClient.from_settings(settings)

    try:
        synchronizer = SearchIndexSynchronizer(client)
        async with session_factory() as session:
            await synchronizer.sync_from_store(session, change)
    finally:
        if owns_client:
            await client.aclose()
        if engine is not None:
            await engine.dispose()


@app.task(
    bind=True,
    name="componentvault.tasks.search_sync.sync_search_document",
    max_retries=5,
)
def sync_search_document(self, index: str, object_id: str, operation: str) -> Dict[str, Any]:
    """
    검색 인덱스 단일 문서 동기화

    Args:
        index: 인덱스 이름 (components, users, collections)
        object_id: 레코드 ID
        operation: create, update, delete

    Returns:
        Dict[str, Any]: 동기화 결과
    """
    change = DocumentChange(
        index=index, object_id=object_id, operation=ChangeOperation(operation)
    )

    try:
        logger.info(f"[SYNC] {operation} {index}/{object_id}")
        asyncio.run(_sync_document(change))
    except Exception as exc:
        logger.error(f"[FAIL] Failed to sync {index}/{object_id}: {exc}")
        if self.request.retries < self.max_retries:
            logger.warning(f"[RETRY] Retrying search sync for {index}/{object_id}")
            raise self.retry(exc=exc, countdown=2**self.request.retries)
        capture_exception_with_context(
            exc, index=index, object_id=object_id, operation=operation
        )
        raise

    return {
        "success": True,
        "index": index,
        "object_id": object_id,
        "operation": operation,
    }
