"""
컬렉션 API 엔드포인트
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.api.schemas.collection_schemas import (
    CollectionComponentsRequest,
    CollectionCreateRequest,
    CollectionUpdateRequest,
)
from componentvault.middleware.auth import (
    check_resource_ownership,
    get_current_user,
    get_current_user_id,
)
from componentvault.models.base import get_db
from componentvault.models.user import User
from componentvault.services.collection_service import CollectionService
from componentvault.utils.logging import audit_logger

router = APIRouter(prefix="/v1/collections", tags=["Collections"])


@router.get("")
async def list_collections(
    user_id: str = Query(..., min_length=1, description="컬렉션 소유자 ID"),
    db: AsyncSession = Depends(get_db),
):
    """사용자 컬렉션 목록 (최신순)"""
    collections = await CollectionService(db).list_user_collections(user_id)
    return [collection.to_dict() for collection in collections]


@router.get("/{collection_id}")
async def get_collection(
    collection_id: str,
    db: AsyncSession = Depends(get_db),
):
    collection = await CollectionService(db).get_collection(collection_id)
    return collection.to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_collection(
    request: CollectionCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """컬렉션 생성 (공개 여부 기본값 true)"""
    collection = await CollectionService(db).create_collection(
        current_user, request.model_dump(exclude_unset=True)
    )
    return {
        "success": True,
        "collection_id": str(collection.id),
        "message": "Collection created successfully",
    }


@router.put("/{collection_id}")
async def update_collection(
    collection_id: str,
    request: CollectionUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = CollectionService(db)
    collection = await service.get_collection(collection_id)
    check_resource_ownership(collection.user_id, user_id)

    collection = await service.update_collection(
        collection, request.model_dump(exclude_unset=True)
    )
    return collection.to_dict()


@router.delete("/{collection_id}")
async def delete_collection(
    collection_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = CollectionService(db)
    collection = await service.get_collection(collection_id)
    check_resource_ownership(collection.user_id, user_id)

    await service.delete_collection(collection)
    audit_logger.log_collection_deleted(collection_id, user_id)

    return {"success": True, "message": "Collection deleted successfully"}


@router.post("/{collection_id}/components")
async def add_components(
    collection_id: str,
    request: CollectionComponentsRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    컬렉션에 컴포넌트 추가

    이미 포함된 컴포넌트는 다시 추가되지 않습니다.
    """
    service = CollectionService(db)
    collection = await service.get_collection(collection_id)
    check_resource_ownership(collection.user_id, user_id)

    collection = await service.add_components(collection, request.component_ids)
    return collection.to_dict()


@router.delete("/{collection_id}/components/{component_id}")
async def remove_component(
    collection_id: str,
    component_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = CollectionService(db)
    collection = await service.get_collection(collection_id)
    check_resource_ownership(collection.user_id, user_id)

    collection = await service.remove_component(collection, component_id)
    return collection.to_dict()
