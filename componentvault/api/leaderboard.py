"""
리더보드 API 엔드포인트
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.base import get_db
from componentvault.services.leaderboard_service import LeaderboardService
from componentvault.services.stats_service import StatsService

router = APIRouter(prefix="/v1/leaderboard", tags=["Leaderboard"])


@router.get("")
async def get_leaderboard(
    type: str = Query(
        "contributors", description="랭킹 종류 (알 수 없는 값은 contributors)"
    ),
    period: str = Query(
        "alltime", description="집계 기간 year, month, week (그 외는 alltime)"
    ),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    기여자 리더보드

    - contributors: 컴포넌트 수 (동률 시 다운로드)
    - downloads: 다운로드 합계
    - rated: 평균 평점
    - rising: 최근 가입자 중 성장 점수
    """
    return await LeaderboardService(db).get_leaderboard(
        ranking_type=type, period=period, limit=limit
    )


@router.get("/stats")
async def get_leaderboard_stats(db: AsyncSession = Depends(get_db)):
    """리더보드 요약 통계 (조회 실패 시에도 0으로 채워 200 응답)"""
    return await StatsService(db).get_summary()
