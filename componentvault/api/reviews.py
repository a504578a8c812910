"""
리뷰 API 엔드포인트

리뷰 조회(집계 포함), 작성, 도움돼요 투표 기능을 제공합니다.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.api.schemas.social_schemas import (
    ReviewCreateRequest,
    ReviewVoteRequest,
)
from componentvault.middleware.auth import get_current_user, get_current_user_id
from componentvault.models.base import get_db
from componentvault.models.user import User
from componentvault.services.review_service import ReviewService

router = APIRouter(prefix="/v1/reviews", tags=["Reviews"])


@router.get("")
async def get_component_reviews(
    component_id: str = Query(..., min_length=1, description="컴포넌트 ID"),
    db: AsyncSession = Depends(get_db),
):
    """
    컴포넌트 리뷰 목록 조회

    최신순 목록과 함께 전체 개수, 평균 별점, 별점 분포(5..1)를 반환합니다.
    """
    return await ReviewService(db).list_reviews(component_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    request: ReviewCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    리뷰 작성

    - 별점은 1~5
    - 사용자당 컴포넌트당 하나 (중복 시 400)
    - 작성 후 컴포넌트 평균 평점 재계산
    """
    review = await ReviewService(db).create_review(
        current_user,
        component_id=request.component_id,
        rating=request.rating,
        comment=request.comment,
    )
    return {
        "success": True,
        "review_id": str(review.id),
        "message": "Review created successfully",
    }


@router.post("/{review_id}/vote")
async def vote_review(
    review_id: str,
    request: ReviewVoteRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """리뷰 투표 (helpful / not_helpful, 사용자당 한 번)"""
    await ReviewService(db).vote(review_id, user_id, request.action)
    return {"success": True, "message": "Vote recorded"}
