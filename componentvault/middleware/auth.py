"""
JWT 인증 미들웨어

FastAPI 의존성 주입을 활용한 Bearer 토큰 인증을 제공합니다.
토큰은 외부 ID 공급자가 발급하며, `sub` 클레임이 사용자 ID입니다.
"""

from typing import Any, Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.base import get_db
from componentvault.utils.exceptions import (
    ForbiddenException,
    UnauthorizedException,
    UserNotFoundException,
)
from componentvault.utils.security import JWTManager


# HTTP Bearer 토큰 스킴 (Authorization: Bearer <token>)
# auto_error=False: 토큰 누락 시 403 대신 401로 응답
security = HTTPBearer(auto_error=False)


def _decode(request: Request, token: str) -> dict[str, Any]:
    settings = getattr(request.app.state, "settings", None)
    try:
        payload = JWTManager.decode_token(token, settings=settings)
    except ValueError as e:
        raise UnauthorizedException(str(e))

    if not payload.get("sub"):
        raise UnauthorizedException("토큰에서 사용자 정보를 찾을 수 없습니다.")
    return payload


async def get_token_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict[str, Any]:
    """
    검증된 토큰 페이로드 반환

    Raises:
        UnauthorizedException: 토큰이 없거나 유효하지 않은 경우
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("인증 토큰이 필요합니다.")
    return _decode(request, credentials.credentials)


async def get_current_user_id(
    claims: dict[str, Any] = Depends(get_token_claims),
) -> str:
    """
    현재 요청의 사용자 ID 추출

    Example:
        ```python
        @router.post("/favorites")
        async def add_favorite(user_id: str = Depends(get_current_user_id)):
            ...
        ```
    """
    return claims["sub"]


async def get_optional_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """
    토큰이 있으면 사용자 ID, 없으면 None

    토큰이 주어졌지만 유효하지 않은 경우에는 401을 반환합니다.
    """
    if credentials is None or not credentials.credentials:
        return None
    return _decode(request, credentials.credentials)["sub"]


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    현재 요청의 사용자 객체 조회

    Raises:
        UserNotFoundException: 사용자 레코드가 없는 경우 (404)
    """
    from componentvault.models.user import User

    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundException(user_id)
    return user


def check_resource_ownership(owner_id: Optional[str], user_id: str) -> None:
    """
    리소스 소유자 확인

    Raises:
        ForbiddenException: 요청자가 소유자가 아닌 경우
    """
    if owner_id != user_id:
        raise ForbiddenException("리소스 소유자만 수행할 수 있습니다.")
