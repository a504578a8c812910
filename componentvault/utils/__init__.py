"""
유틸리티 패키지

보안, 로깅, 예외 처리, 모니터링 등의 공통 유틸리티를 제공합니다.
"""

from componentvault.utils.security import JWTManager

from componentvault.utils.logging import (
    setup_logging,
    get_logger,
    AuditLogger,
    audit_logger,
)

from componentvault.utils.exceptions import (
    AppException,
    ValidationException,
    NotFoundException,
    UnauthorizedException,
    ForbiddenException,
    ConflictException,
    ExternalServiceException,
    DatabaseException,
    InternalException,
    ComponentNotFoundException,
    CollectionNotFoundException,
    UserNotFoundException,
)

__all__ = [
    # 보안
    "JWTManager",
    # 로깅
    "setup_logging",
    "get_logger",
    "AuditLogger",
    "audit_logger",
    # 예외
    "AppException",
    "ValidationException",
    "NotFoundException",
    "UnauthorizedException",
    "ForbiddenException",
    "ConflictException",
    "ExternalServiceException",
    "DatabaseException",
    "InternalException",
    "ComponentNotFoundException",
    "CollectionNotFoundException",
    "UserNotFoundException",
]
