"""
커스텀 예외 클래스 정의

애플리케이션 전역에서 사용하는 예외 클래스를 정의합니다.
"""

from typing import Optional, Any
from fastapi import status


class AppException(Exception):
    """
    애플리케이션 기본 예외 클래스

    모든 커스텀 예외는 이 클래스를 상속받습니다.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "app_error",
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AppException):
    """
    입력 검증 실패 예외

    사용자 입력이 유효하지 않을 때 발생합니다.
    """

    def __init__(
        self,
        message: str = "입력 데이터가 유효하지 않습니다.",
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if field:
            details = details or {}
            details["field"] = field

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="validation_error",
            details=details,
        )


class NotFoundException(AppException):
    """
    리소스를 찾을 수 없을 때 발생하는 예외
    """

    def __init__(
        self,
        resource: str = "리소스",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            if resource_id:
                message = f"{resource}를 찾을 수 없습니다 (ID: {resource_id})"
            else:
                message = f"{resource}를 찾을 수 없습니다."

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
            details={"resource": resource, "resource_id": resource_id},
        )


class UnauthorizedException(AppException):
    """
    인증 실패 예외 (401 Unauthorized)
    """

    def __init__(self, message: str = "인증에 실패했습니다."):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="unauthorized",
        )


class ForbiddenException(AppException):
    """
    권한 부족 예외 (403 Forbidden)

    인증은 되었지만 리소스 소유자가 아닐 때 발생합니다.
    """

    def __init__(self, message: str = "접근 권한이 없습니다."):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="forbidden",
        )


class ConflictException(AppException):
    """
    리소스 충돌 예외 (409 Conflict)

    예: 이미 사용 중인 username으로 프로필을 변경하려는 경우
    """

    def __init__(
        self,
        message: str = "이미 존재하는 리소스입니다.",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="conflict",
            details=details,
        )


class ExternalServiceException(AppException):
    """
    외부 서비스 통신 실패 예외

    예: 검색 인덱스 API 연결 실패
    """

    def __init__(
        self,
        service: str,
        message: str = "외부 서비스 요청에 실패했습니다.",
        details: Optional[dict[str, Any]] = None,
    ):
        details = details or {}
        details["service"] = service

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="external_service_error",
            details=details,
        )


class DatabaseException(AppException):
    """
    데이터베이스 오류 예외
    """

    def __init__(
        self,
        message: str = "데이터베이스 오류가 발생했습니다.",
        operation: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        details = details or {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="database_error",
            details=details,
        )


class InternalException(AppException):
    """
    일괄 작업 실패 등 세부 내용을 노출하지 않는 내부 오류
    """

    def __init__(self, message: str = "Internal error"):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="internal",
        )


# ComponentVault 전용 예외 클래스


class ComponentNotFoundException(NotFoundException):
    """컴포넌트를 찾을 수 없을 때"""

    def __init__(self, component_id: str):
        super().__init__(resource="컴포넌트", resource_id=str(component_id))


class CollectionNotFoundException(NotFoundException):
    """컬렉션을 찾을 수 없을 때"""

    def __init__(self, collection_id: str):
        super().__init__(resource="컬렉션", resource_id=str(collection_id))


class UserNotFoundException(NotFoundException):
    """사용자를 찾을 수 없을 때"""

    def __init__(self, user_id: str):
        super().__init__(resource="사용자", resource_id=str(user_id))
