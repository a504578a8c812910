"""
댓글 API 엔드포인트
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.api.schemas.social_schemas import CommentCreateRequest
from componentvault.middleware.auth import (
    check_resource_ownership,
    get_current_user,
    get_current_user_id,
)
from componentvault.models.base import get_db
from componentvault.models.user import User
from componentvault.services.comment_service import CommentService

router = APIRouter(prefix="/v1/comments", tags=["Comments"])


@router.get("")
async def list_comments(
    component_id: str = Query(..., min_length=1, description="컴포넌트 ID"),
    db: AsyncSession = Depends(get_db),
):
    comments = await CommentService(db).list_comments(component_id)
    return [comment.to_dict() for comment in comments]


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_comment(
    request: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """댓글 작성 (comment 활동 기록)"""
    comment = await CommentService(db).add_comment(
        current_user, request.component_id, request.content
    )
    return comment.to_dict()


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = CommentService(db)
    comment = await service.get_comment(comment_id)
    check_resource_ownership(comment.user_id, user_id)

    await service.delete_comment(comment)
    return {"success": True, "message": "Comment deleted successfully"}
