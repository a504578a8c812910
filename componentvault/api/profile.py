"""
프로필 API 엔드포인트

인증된 사용자 본인의 프로필 통계, 활동 피드, 컴포넌트, 업적을 제공합니다.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.middleware.auth import get_current_user
from componentvault.models.base import get_db
from componentvault.models.user import User
from componentvault.services.achievement_service import AchievementService
from componentvault.services.activity_service import ActivityService
from componentvault.services.user_service import UserService

router = APIRouter(prefix="/v1/profile", tags=["Profile"])


@router.get("")
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    프로필 조회

    stats: components, downloads, favorites, views, followers, following
    """
    return await UserService(db).get_profile(current_user)


@router.get("/activity")
async def get_activity(
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """활동 피드 (최신순, 상대 시간 텍스트 포함)"""
    return await ActivityService(db).list_feed(current_user.id, limit=limit)


@router.get("/components")
async def get_components(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    components = await UserService(db).list_components(current_user.id, limit=limit)
    return [component.to_dict(include_code=False) for component in components]


@router.get("/achievements")
async def get_achievements(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """획득한 업적 목록"""
    return await AchievementService(db).get_achievements(current_user)
