"""
즐겨찾기/팔로우/리뷰/댓글 API Pydantic 스키마
"""

from pydantic import BaseModel, Field


class FavoriteRequest(BaseModel):
    """즐겨찾기 추가 요청"""

    component_id: str = Field(..., min_length=1, description="컴포넌트 ID")


class FollowRequest(BaseModel):
    """팔로우 요청"""

    following_id: str = Field(..., min_length=1, description="팔로우할 사용자 ID")


class ReviewCreateRequest(BaseModel):
    """리뷰 작성 요청"""

    component_id: str = Field(..., min_length=1, description="컴포넌트 ID")
    rating: int = Field(..., ge=1, le=5, description="별점 (1-5)")
    comment: str = Field("", description="리뷰 내용")


class ReviewVoteRequest(BaseModel):
    """리뷰 투표 요청 (액션 값 검증은 서비스에서 400으로 처리)"""

    action: str = Field(..., description="helpful 또는 not_helpful")


class CommentCreateRequest(BaseModel):
    """댓글 작성 요청"""

    component_id: str = Field(..., min_length=1, description="컴포넌트 ID")
    content: str = Field(..., min_length=1, max_length=5000, description="댓글 내용")
