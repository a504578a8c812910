"""
검색 관련 FastAPI 의존성

lifespan에서 생성해 app.state에 보관한 객체를 주입합니다. 테스트는 dependency_overrides로 교체합니다.
"""

from typing import Optional

from fastapi import Request

from componentvault.search.client import SearchIndexClient
from componentvault.search.synchronizer import SearchIndexSynchronizer
from componentvault.utils.exceptions import ExternalServiceException


def get_search_index(request: Request) -> Optional[SearchIndexClient]:
    return getattr(request.app.state, "search_index", None)


def get_change_publisher(request: Request):
    return getattr(request.app.state, "change_publisher", None)


def get_synchronizer(request: Request) -> SearchIndexSynchronizer:
    """
    검색 인덱스 동기화기

    Raises:
        ExternalServiceException: 검색 인덱스 자격 증명이 설정되지 않은 경우 (503)
    """
    client = get_search_index(request)
    if client is None:
        raise ExternalServiceException(
            service="search_index", message="Search index is not configured"
        )
    return SearchIndexSynchronizer(client)
