"""
즐겨찾기 API 엔드포인트
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.api.schemas.social_schemas import FavoriteRequest
from componentvault.middleware.auth import get_current_user
from componentvault.models.base import get_db
from componentvault.models.user import User
from componentvault.services.favorite_service import FavoriteService

router = APIRouter(prefix="/v1/favorites", tags=["Favorites"])


@router.get("")
async def get_favorites(
    user_id: str = Query(..., min_length=1, description="사용자 ID"),
    component_id: Optional[str] = Query(None, description="즐겨찾기 여부를 확인할 컴포넌트"),
    db: AsyncSession = Depends(get_db),
):
    """
    즐겨찾기 조회

    component_id가 주어지면 {is_favorited}, 아니면 사용자의 즐겨찾기 목록(최신순)을 반환합니다.
    """
    service = FavoriteService(db)
    if component_id:
        return {"is_favorited": await service.is_favorited(user_id, component_id)}

    favorites = await service.list_favorites(user_id)
    return [favorite.to_dict() for favorite in favorites]


@router.post("")
async def add_favorite(
    request: FavoriteRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """즐겨찾기 추가 (이미 추가된 경우 변경 없음)"""
    added = await FavoriteService(db).add_favorite(current_user.id, request.component_id)
    return {
        "success": True,
        "message": "Added to favorites" if added else "Already in favorites",
    }


@router.delete("/{component_id}")
async def remove_favorite(
    component_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await FavoriteService(db).remove_favorite(current_user.id, component_id)
    return {"success": True, "message": "Removed from favorites"}
