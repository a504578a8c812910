"""
팔로우 API 엔드포인트
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.api.schemas.social_schemas import FollowRequest
from componentvault.middleware.auth import get_current_user
from componentvault.models.base import get_db
from componentvault.models.user import User
from componentvault.services.follow_service import FollowService

router = APIRouter(prefix="/v1/follows", tags=["Follows"])


@router.get("")
async def get_follow_status(
    follower_id: str = Query(..., min_length=1),
    following_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """팔로우 여부 확인"""
    is_following = await FollowService(db).is_following(follower_id, following_id)
    return {"is_following": is_following}


@router.post("")
async def follow_user(
    request: FollowRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    팔로우 (멱등)

    자기 자신은 팔로우할 수 없습니다 (400).
    """
    await FollowService(db).follow(current_user.id, request.following_id)
    return {"success": True, "message": "Followed successfully"}


@router.delete("/{following_id}")
async def unfollow_user(
    following_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await FollowService(db).unfollow(current_user.id, following_id)
    return {"success": True, "message": "Unfollowed successfully"}
