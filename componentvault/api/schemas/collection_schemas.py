"""
컬렉션 API Pydantic 스키마
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class CollectionCreateRequest(BaseModel):
    """컬렉션 생성 요청"""

    name: str = Field(..., min_length=1, max_length=100, description="컬렉션 이름")
    description: Optional[str] = None
    cover_image: Optional[str] = Field(None, max_length=500)
    user_name: Optional[str] = Field(None, max_length=100)
    is_public: Optional[bool] = Field(None, description="기본값 True")


class CollectionUpdateRequest(BaseModel):
    """컬렉션 수정 요청"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    cover_image: Optional[str] = Field(None, max_length=500)
    is_public: Optional[bool] = None


class CollectionComponentsRequest(BaseModel):
    """컬렉션 컴포넌트 추가 요청"""

    component_ids: List[str] = Field(..., min_length=1, description="추가할 컴포넌트 ID 목록")
