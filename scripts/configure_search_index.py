"""
검색 인덱스 설정 적용 스크립트

componentvault.search.index_settings의 검색 속성, facet, 랭킹 설정을 인덱스별로 한 번 적용합니다.
"""

import asyncio
import sys

from componentvault.config import get_settings
from componentvault.search.client import SearchIndexClient, SearchIndexError
from componentvault.search.index_settings import INDEX_SETTINGS
from componentvault.utils.logging import setup_logging


async def main() -> int:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.LOG_FILE)

    if not settings.search_enabled:
        print("[ERROR] SEARCH_APP_ID / SEARCH_API_KEY가 설정되지 않았습니다.")
        return 1

    client = SearchIndexClient.from_settings(settings)
    failed = 0
    try:
        for index, index_settings in INDEX_SETTINGS.items():
            try:
                await client.set_settings(index, index_settings)
                print(f"[OK] {client.index_name(index)} 설정 적용")
            except SearchIndexError as e:
                failed += 1
                print(f"[FAIL] {client.index_name(index)}: {e}")
    finally:
        await client.aclose()

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
