"""
컴포넌트 API 엔드포인트

컴포넌트 목록/조회/등록/수정/삭제 및 지표 액션을 제공합니다.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.api.schemas.component_schemas import (
    ComponentCreateRequest,
    ComponentUpdateRequest,
    MetricRequest,
)
from componentvault.middleware.auth import (
    check_resource_ownership,
    get_current_user,
    get_current_user_id,
    get_optional_user_id,
)
from componentvault.models.base import get_db
from componentvault.models.user import User
from componentvault.services.component_service import ComponentService
from componentvault.utils.exceptions import ForbiddenException, UnauthorizedException
from componentvault.utils.logging import audit_logger

router = APIRouter(prefix="/v1/components", tags=["Components"])


@router.get("")
async def list_components(
    category: Optional[str] = Query(None, description="카테고리 필터"),
    framework: Optional[str] = Query(None, description="프레임워크 필터"),
    source_type: Optional[str] = Query(None, description="출처 필터"),
    author_id: Optional[str] = Query(None, description="작성자 필터"),
    is_public: Optional[bool] = Query(None, description="공개 여부 필터 (작성자 본인만 false 가능)"),
    include_private: bool = Query(False, description="작성자 본인의 비공개 컴포넌트 포함"),
    order_by: Literal["created_at", "likes", "views", "downloads", "copies", "title"] = Query(
        "created_at", description="정렬 필드"
    ),
    order: Literal["asc", "desc"] = Query("desc", description="정렬 방향"),
    limit: int = Query(20, ge=1, le=100, description="최대 개수"),
    user_id: Optional[str] = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    컴포넌트 목록 조회

    기본적으로 공개 컴포넌트만 반환합니다.
    include_private=true는 인증된 작성자 본인이 author_id로 자신의 목록을 조회할 때만 허용됩니다.
    """
    visibility: Optional[bool] = True
    if include_private or is_public is False:
        if user_id is None:
            raise UnauthorizedException("인증 토큰이 필요합니다.")
        if not author_id or author_id != user_id:
            raise ForbiddenException("Can only fetch your own private components")
        visibility = is_public if not include_private else None

    service = ComponentService(db)
    components = await service.list_components(
        category=category,
        framework=framework,
        source_type=source_type,
        author_id=author_id,
        is_public=visibility,
        order_by=order_by,
        order=order,
        limit=limit,
    )
    return [component.to_dict(include_code=False) for component in components]


@router.get("/{component_id}")
async def get_component(
    component_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    컴포넌트 상세 조회

    조회수는 best-effort로 1 증가합니다.
    """
    service = ComponentService(db)
    component = await service.get_component(component_id)
    await service.record_view(component)
    return component.to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_component(
    request: ComponentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    컴포넌트 등록

    카운터는 0에서 시작하고 작성자의 컴포넌트 수가 1 증가합니다.
    """
    service = ComponentService(db)
    component = await service.create_component(
        current_user, request.model_dump(exclude_unset=True)
    )

    audit_logger.log_component_created(str(component.id), current_user.id)

    return {
        "success": True,
        "component_id": str(component.id),
        "message": "Component created successfully",
    }


@router.put("/{component_id}")
async def update_component(
    component_id: str,
    request: ComponentUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """컴포넌트 수정 (작성자만)"""
    service = ComponentService(db)
    component = await service.get_component(component_id)
    check_resource_ownership(component.author_id, user_id)

    component = await service.update_component(
        component, request.model_dump(exclude_unset=True)
    )
    return {
        "success": True,
        "message": "Component updated successfully",
        "component": component.to_dict(),
    }


@router.delete("/{component_id}")
async def delete_component(
    component_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """컴포넌트 삭제 (작성자만)"""
    service = ComponentService(db)
    component = await service.get_component(component_id)
    check_resource_ownership(component.author_id, user_id)

    await service.delete_component(component)

    audit_logger.log_component_deleted(component_id, user_id)

    return {"success": True, "message": "Component deleted successfully"}


@router.post("/{component_id}/metrics")
async def record_metric(
    component_id: str,
    request: MetricRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    지표 액션 기록

    action: view, download, copy, like, unlike (그 외 400)
    """
    await ComponentService(db).apply_metric(component_id, request.action)
    return {"ok": True}


@router.post("/{component_id}/copy")
async def copy_component(
    component_id: str,
    db: AsyncSession = Depends(get_db),
):
    """코드 복사 횟수 증가"""
    await ComponentService(db).apply_metric(component_id, "copy")
    return {"success": True, "message": "Copy count updated"}
