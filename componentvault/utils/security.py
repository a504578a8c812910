"""
보안 유틸리티 모듈

외부 ID 공급자가 발급한 JWT 토큰을 검증합니다.
개발/테스트 환경에서 사용할 토큰 발급 헬퍼도 함께 제공합니다.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from jose import JWTError, jwt

from componentvault.config import Settings, get_settings


class JWTManager:
    """
    JWT 토큰 생성 및 검증 관리 클래스

    `sub` 클레임이 ID 공급자의 사용자 UID이며, 애플리케이션의 User.id와 같습니다.
    """

    @staticmethod
    def create_access_token(
        subject: str,
        claims: Optional[dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None,
        settings: Optional[Settings] = None,
    ) -> str:
        """
        Access Token 생성 (로컬 개발 및 테스트용)

        Example:
            >>> token = JWTManager.create_access_token("uid_123", {"email": "a@b.dev"})
        """
        settings = settings or get_settings()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )

        to_encode = dict(claims or {})
        to_encode.update({"sub": subject, "exp": expire})
        if settings.AUTH_ISSUER:
            to_encode.setdefault("iss", settings.AUTH_ISSUER)
        if settings.AUTH_AUDIENCE:
            to_encode.setdefault("aud", settings.AUTH_AUDIENCE)

        return jwt.encode(
            to_encode, settings.AUTH_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
        )

    @staticmethod
    def decode_token(token: str, settings: Optional[Settings] = None) -> dict:
        """
        JWT 토큰 디코딩 및 검증

        서명, 만료 시간을 검증하고, 설정된 경우 issuer/audience도 확인합니다.

        Args:
            token: JWT 토큰

        Returns:
            dict: 디코딩된 페이로드

        Raises:
            ValueError: 토큰이 유효하지 않거나 만료된 경우
        """
        settings = settings or get_settings()
        try:
            return jwt.decode(
                token,
                settings.AUTH_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
                audience=settings.AUTH_AUDIENCE,
                issuer=settings.AUTH_ISSUER,
                options={"verify_aud": bool(settings.AUTH_AUDIENCE)},
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {str(e)}")
