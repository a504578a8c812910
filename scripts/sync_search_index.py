"""
검색 인덱스 전체 재동기화 스크립트

저장소의 컴포넌트/사용자/컬렉션을 모두 읽어 검색 인덱스에 다시 저장합니다.
POST /v1/search/resync와 같은 동기화기를 사용합니다.
"""

import asyncio
import sys

from componentvault.config import get_settings
from componentvault.models.base import create_engine, create_session_factory
from componentvault.search.client import SearchIndexClient
from componentvault.search.synchronizer import SearchIndexSynchronizer
from componentvault.utils.exceptions import InternalException
from componentvault.utils.logging import setup_logging


async def main() -> int:
    """메인 실행 함수"""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.LOG_FILE)

    print("[START] 검색 인덱스 재동기화")

    if not settings.search_enabled:
        print("[ERROR] SEARCH_APP_ID / SEARCH_API_KEY가 설정되지 않았습니다.")
        return 1

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    client = SearchIndexClient.from_settings(settings)

    try:
        async with session_factory() as session:
            results = await SearchIndexSynchronizer(client).resync_all(session)
    except InternalException as e:
        print(f"[FAIL] {e.message}")
        return 1
    finally:
        await client.aclose()
        await engine.dispose()

    for index, count in results.items():
        print(f"  - {index}: {count}건")
    print("[SUCCESS] 재동기화 완료")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
