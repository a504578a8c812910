"""
Search Service: 저장소 기반 컴포넌트 검색

호스팅 검색 인덱스를 사용할 수 없을 때의 대체 검색입니다.
공개 컴포넌트의 제목, 설명, 태그에 대해 대소문자 구분 없는 부분 일치를 수행합니다.
"""

from typing import List

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.component import Component


class SearchService:
    """저장소 기반 검색 서비스"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search_components(self, query: str, limit: int = 20) -> List[Component]:
        """
        공개 컴포넌트 검색 (최신순)

        Args:
            query: 검색어
            limit: 최대 결과 수
        """
        term = query.strip().lower()

        stmt = (
            select(Component)
            .where(
                Component.is_public.is_(True),
                or_(
                    func.lower(Component.title).contains(term, autoescape=True),
                    func.lower(Component.description).contains(term, autoescape=True),
                    # 태그 JSON 배열의 텍스트 표현에서 부분 일치
                    func.lower(cast(Component.tags, String)).contains(
                        term, autoescape=True
                    ),
                ),
            )
            .order_by(Component.created_at.desc(), Component.id)
            .limit(limit)
        )

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
