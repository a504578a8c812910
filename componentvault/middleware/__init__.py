"""
미들웨어 패키지

인증, 모니터링 등의 미들웨어를 제공합니다.
"""

from componentvault.middleware.auth import (
    get_token_claims,
    get_current_user,
    get_current_user_id,
    get_optional_user_id,
    check_resource_ownership,
)

from componentvault.middleware.prometheus import PrometheusMiddleware

__all__ = [
    # 인증
    "get_token_claims",
    "get_current_user",
    "get_current_user_id",
    "get_optional_user_id",
    "check_resource_ownership",
    # 모니터링
    "PrometheusMiddleware",
]
