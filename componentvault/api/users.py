"""
사용자 API 엔드포인트

사용자 조회, 토큰 기반 사용자 레코드 생성, 프로필 수정을 제공합니다.
"""

from typing import Any

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.api.schemas.user_schemas import ProfileUpdateRequest
from componentvault.middleware.auth import get_current_user, get_token_claims
from componentvault.models.base import get_db
from componentvault.models.user import User
from componentvault.services.user_service import UserService

router = APIRouter(prefix="/v1/users", tags=["Users"])


@router.post("/me")
async def ensure_current_user(
    response: Response,
    claims: dict[str, Any] = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
):
    """
    현재 사용자 레코드 생성

    토큰 클레임(email, name, picture)으로 레코드를 만들며, 이미 있으면 그대로 반환합니다.
    새로 생성된 경우 201로 응답합니다.
    """
    user, created = await UserService(db).ensure_user(claims)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return user.to_dict()


@router.put("/me")
async def update_current_user(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """프로필 수정 (username 중복 시 409)"""
    user = await UserService(db).update_profile(
        current_user, request.model_dump(exclude_unset=True)
    )
    return user.to_dict()


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).get_user(user_id)
    return user.to_dict()
