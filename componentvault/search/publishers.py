"""
검색 변경 전달 방식

- celery: 변경마다 sync_search_document 태스크 발행 (기본값, 재시도 보장)
- inline: 요청 처리 직후 같은 프로세스에서 바로 동기화 (개발/소규모 배포)
- disabled: 아무것도 하지 않음 (테스트, 자격 증명 미설정)
"""

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from componentvault.config import Settings
from componentvault.search.changes import DocumentChange
from componentvault.search.client import SearchIndexClient
from componentvault.search.synchronizer import SearchIndexSynchronizer
from componentvault.utils.sentry_config import capture_exception_with_context

logger = logging.getLogger(__name__)


class NullChangePublisher:
    """변경을 버리는 publisher"""

    async def publish(self, changes: Sequence[DocumentChange]) -> None:
        return None


class InlineChangePublisher:
    """
    같은 프로세스에서 즉시 동기화

    요청 세션과 분리된 새 세션으로 현재 상태를 읽습니다.
    실패는 로그만 남기며 응답에는 영향을 주지 않습니다 (다음 변경이나 resync로 복구).
    """

    def __init__(
        self,
        synchronizer: SearchIndexSynchronizer,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.synchronizer = synchronizer
        self.session_factory = session_factory

    async def publish(self, changes: Sequence[DocumentChange]) -> None:
        async with self.session_factory() as session:
            for change in changes:
                try:
                    await self.synchronizer.sync_from_store(session, change)
                except Exception:
                    logger.warning(
                        f"[SKIP] Inline search sync failed for "
                        f"{change.index}/{change.object_id}",
                        exc_info=True,
                    )


class CeleryChangePublisher:
    """
    변경마다 Celery 태스크 발행

    브로커 호출은 스레드풀에서 실행합니다.
    발행 실패는 로그와 Sentry로 남기고 나머지 변경은 계속 발행합니다 (resync로 복구).
    """

    async def publish(self, changes: Sequence[DocumentChange]) -> None:
        from componentvault.tasks.search_sync import sync_search_document

        for change in changes:
            try:
                await run_in_threadpool(
                    sync_search_document.delay,
                    change.index,
                    change.object_id,
                    change.operation.value,
                )
            except Exception as exc:
                logger.error(
                    f"[FAIL] Failed to enqueue search sync for "
                    f"{change.index}/{change.object_id}: {exc}"
                )
                capture_exception_with_context(
                    exc,
                    index=change.index,
                    object_id=change.object_id,
                    operation=change.operation.value,
                )


def build_change_publisher(
    settings: Settings,
    client: Optional[SearchIndexClient],
    session_factory: async_sessionmaker[AsyncSession],
):
    """설정에 맞는 change publisher 생성"""
    backend = settings.SEARCH_SYNC_BACKEND.lower()

    if backend == "disabled":
        return NullChangePublisher()

    if client is None or not settings.search_enabled:
        logger.warning(
            "[WARNING] Search credentials not configured, search index sync disabled"
        )
        return NullChangePublisher()

    if backend == "inline":
        return InlineChangePublisher(SearchIndexSynchronizer(client), session_factory)

    if backend != "celery":
        logger.warning(f"[WARNING] Unknown SEARCH_SYNC_BACKEND '{backend}', using celery")
    return CeleryChangePublisher()
