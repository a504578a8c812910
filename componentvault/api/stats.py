"""
플랫폼 통계 API 엔드포인트
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.base import get_db
from componentvault.services.stats_service import StatsService

router = APIRouter(prefix="/v1/stats", tags=["Stats"])


@router.get("")
async def get_platform_stats(db: AsyncSession = Depends(get_db)):
    return await StatsService(db).get_platform_stats()
