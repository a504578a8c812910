"""
검색 인덱스 REST 클라이언트

Algolia 호환 REST API(/1/indexes/...)에 객체를 저장/삭제하고 인덱스 설정을 적용합니다.

Features:
- 비동기 HTTP 요청 (httpx.AsyncClient)
- 요청 타임아웃 (SEARCH_TIMEOUT_SECONDS)
- 재시도 로직 (전송 오류와 5xx 응답, 지수 백오프)
- 인덱스 이름 prefix (환경별 인덱스 분리)
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from componentvault.config import Settings
from componentvault.utils.exceptions import ExternalServiceException

logger = logging.getLogger(__name__)


class SearchIndexError(ExternalServiceException):
    """검색 인덱스 요청 실패"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"upstream_status": status_code} if status_code else None
        super().__init__(service="search_index", message=message, details=details)
        self.upstream_status = status_code


class SearchIndexClient:
    """
    검색 인덱스 클라이언트

    Example:
        ```python
        client = SearchIndexClient.from_settings(get_settings())
        await client.save_object("components", {"objectID": "c1", "name": "Button"})
        await client.aclose()
        ```
    """

    def __init__(
        self,
        app_id: str,
        api_key: str,
        host: Optional[str] = None,
        index_prefix: str = "",
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff_base: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            app_id: 애플리케이션 ID
            api_key: 쓰기 권한이 있는 API 키
            host: API 호스트 (기본값: https://{app_id}.algolia.net)
            index_prefix: 모든 인덱스 이름 앞에 붙일 prefix
            timeout: 요청 타임아웃 (초)
            max_retries: 최대 시도 횟수
            backoff_base: 재시도 대기 기본값 (초), 시도마다 2배씩 증가
            transport: httpx 전송 계층 (테스트에서 MockTransport 주입)
        """
        self.index_prefix = index_prefix
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        self._client = httpx.AsyncClient(
            base_url=host or f"https://{app_id}.algolia.net",
            headers={
                "X-Algolia-Application-Id": app_id,
                "X-Algolia-API-Key": api_key,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SearchIndexClient":
        return cls(
            app_id=settings.SEARCH_APP_ID,
            api_key=settings.SEARCH_API_KEY,
            host=settings.SEARCH_HOST,
            index_prefix=settings.SEARCH_INDEX_PREFIX,
            timeout=settings.SEARCH_TIMEOUT_SECONDS,
            max_retries=settings.SEARCH_MAX_RETRIES,
            transport=transport,
        )

    async def aclose(self) -> None:
        """HTTP 클라이언트 종료"""
        await self._client.aclose()

    def index_name(self, index: str) -> str:
        return f"{self.index_prefix}{index}"

    def _index_path(self, index: str, *segments: str) -> str:
        parts = [quote(self.index_name(index), safe="")]
        parts.extend(quote(str(segment), safe="") for segment in segments)
        return "/1/indexes/" + "/".join(parts)

    async def _request(
        self,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        HTTP 요청 실행 (재시도 로직 포함)

        Raises:
            SearchIndexError: 4xx 응답이거나 재시도 후에도 실패한 경우
        """
        last_error: Optional[SearchIndexError] = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.request(method, path, json=json_data)
            except httpx.TransportError as e:
                last_error = SearchIndexError(f"Search index request failed: {e}")
            else:
                if response.status_code < 400:
                    if not response.content:
                        return {}
                    return response.json()

                last_error = SearchIndexError(
                    f"Search index responded with {response.status_code}",
                    status_code=response.status_code,
                )
                # 4xx는 재시도해도 결과가 같음
                if response.status_code < 500:
                    raise last_error

            if attempt < self.max_retries - 1:
                wait_time = self.backoff_base * 2**attempt
                logger.warning(
                    f"[RETRY] {method} {path} failed (attempt {attempt + 1}), "
                    f"retrying in {wait_time:.1f}s"
                )
                await asyncio.sleep(wait_time)

        raise last_error

    async def save_object(self, index: str, obj: Dict[str, Any]) -> Dict[str, Any]:
        """objectID 기준으로 객체 전체를 저장 (full replace)"""
        return await self._request(
            "PUT", self._index_path(index, obj["objectID"]), json_data=obj
        )

    async def save_objects(
        self, index: str, objects: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """여러 객체를 단일 batch 요청으로 저장"""
        payload = {
            "requests": [{"action": "updateObject", "body": obj} for obj in objects]
        }
        return await self._request(
            "POST", self._index_path(index, "batch"), json_data=payload
        )

    async def delete_object(self, index: str, object_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", self._index_path(index, object_id))

    async def set_settings(
        self, index: str, index_settings: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._request(
            "PUT", self._index_path(index, "settings"), json_data=index_settings
        )
