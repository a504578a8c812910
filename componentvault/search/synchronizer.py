"""
검색 인덱스 동기화

단일 레코드 생성/수정/삭제 핸들러와 전체 재동기화(resync)를 제공합니다.

- 핸들러는 레코드 ID 기준 full replace이므로 중복/순서 뒤바뀐 전달에도 안전합니다.
- 단일 레코드 동기화 실패는 로그를 남기고 다시 발생시킵니다 (Celery 재시도).
- 재동기화 실패는 부분 결과 없이 InternalException으로 중단됩니다.
"""

import logging
import time
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.search.changes import (
    SEARCH_INDICES,
    ChangeOperation,
    DocumentChange,
)
from componentvault.search.client import SearchIndexClient
from componentvault.search.documents import load_all_documents, load_document
from componentvault.search.projections import project
from componentvault.utils.exceptions import InternalException
from componentvault.utils.prometheus_metrics import record_search_sync

logger = logging.getLogger(__name__)


class SearchIndexSynchronizer:
    """
    저장소 → 검색 인덱스 동기화기

    Example:
        ```python
        synchronizer = SearchIndexSynchronizer(client)
        await synchronizer.on_created("components", component_id, document)
        ```
    """

    def __init__(self, client: SearchIndexClient):
        self.client = client

    async def _upsert(
        self, index: str, object_id: str, doc: Dict[str, Any], operation: str
    ) -> None:
        try:
            obj = project(index, object_id, doc)
            await self.client.save_object(index, obj)
        except Exception as e:
            record_search_sync(index, operation, success=False)
            logger.error(
                f"Error indexing {index}/{object_id} in search index: {e}",
                exc_info=True,
            )
            raise

        record_search_sync(index, operation, success=True)
        logger.info(f"Indexed {index}/{object_id} ({operation})")

    async def on_created(self, index: str, object_id: str, doc: Dict[str, Any]) -> None:
        await self._upsert(index, object_id, doc, ChangeOperation.CREATE.value)

    async def on_updated(self, index: str, object_id: str, doc: Dict[str, Any]) -> None:
        await self._upsert(index, object_id, doc, ChangeOperation.UPDATE.value)

    async def on_deleted(self, index: str, object_id: str) -> None:
        try:
            await self.client.delete_object(index, object_id)
        except Exception as e:
            record_search_sync(index, ChangeOperation.DELETE.value, success=False)
            logger.error(
                f"Error removing {index}/{object_id} from search index: {e}",
                exc_info=True,
            )
            raise

        record_search_sync(index, ChangeOperation.DELETE.value, success=True)
        logger.info(f"Removed {index}/{object_id} from search index")

    async def sync_from_store(self, session: AsyncSession, change: DocumentChange) -> None:
        """
        변경 이벤트 처리

        전달 시점의 현재 상태를 다시 읽어 반영합니다.
        레코드가 더 이상 없으면 이벤트 종류와 무관하게 인덱스에서 삭제합니다.
        """
        if change.operation is ChangeOperation.DELETE:
            await self.on_deleted(change.index, change.object_id)
            return

        doc = await load_document(session, change.index, change.object_id)
        if doc is None:
            await self.on_deleted(change.index, change.object_id)
        elif change.operation is ChangeOperation.CREATE:
            await self.on_created(change.index, change.object_id, doc)
        else:
            await self.on_updated(change.index, change.object_id, doc)

    async def resync_all(self, session: AsyncSession) -> Dict[str, int]:
        """
        전체 재동기화

        각 컬렉션을 모두 읽어 projection 후 인덱스별 단일 batch 요청으로 저장합니다.

        Returns:
            인덱스별 저장 건수 {"components": n, "users": n, "collections": n}

        Raises:
            InternalException: 어느 단계든 실패한 경우
        """
        logger.info("Starting bulk sync to search index...")
        started = time.perf_counter()
        results = {index: 0 for index in SEARCH_INDICES}

        try:
            for index in SEARCH_INDICES:
                documents = await load_all_documents(session, index)
                objects = [project(index, object_id, doc) for object_id, doc in documents]
                if objects:
                    await self.client.save_objects(index, objects)
                results[index] = len(objects)
        except Exception as e:
            logger.error(f"Error syncing data to search index: {e}", exc_info=True)
            raise InternalException("Failed to sync data to search index") from e

        logger.info(
            "Bulk sync completed",
            extra={
                "results": results,
                "elapsed_seconds": round(time.perf_counter() - started, 3),
            },
        )
        return results
