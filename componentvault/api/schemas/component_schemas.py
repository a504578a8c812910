"""
컴포넌트 API Pydantic 스키마

컴포넌트 등록/수정/지표 요청 데이터 구조를 정의합니다.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ComponentCreateRequest(BaseModel):
    """컴포넌트 등록 요청"""

    title: str = Field(..., min_length=1, max_length=200, description="컴포넌트 제목")
    description: str = Field(..., min_length=1, description="설명")
    code: str = Field(..., min_length=1, description="소스 코드")
    preview_image: str = Field(..., min_length=1, max_length=500, description="미리보기 이미지 URL")
    thumbnail_image: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, max_length=50)
    framework: Optional[str] = Field(None, max_length=50)
    language: Optional[str] = Field(None, max_length=50)
    styling: Optional[str] = Field(None, max_length=50)
    source_type: Optional[Literal["upload", "github", "npm", "remix"]] = None
    source_url: Optional[str] = Field(None, max_length=500)
    tags: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    version: Optional[str] = Field(None, max_length=20)
    accessibility_score: Optional[int] = Field(None, ge=0, le=100)
    author_name: Optional[str] = Field(None, max_length=100)
    author_avatar: Optional[str] = Field(None, max_length=500)
    is_public: bool = True

    @field_validator("title", "description", "code", "preview_image")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("필수 항목입니다")
        return v


class ComponentUpdateRequest(BaseModel):
    """컴포넌트 수정 요청 (전달된 필드만 반영)"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = Field(None, min_length=1)
    preview_image: Optional[str] = Field(None, min_length=1, max_length=500)
    thumbnail_image: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, max_length=50)
    framework: Optional[str] = Field(None, max_length=50)
    language: Optional[str] = Field(None, max_length=50)
    styling: Optional[str] = Field(None, max_length=50)
    source_type: Optional[Literal["upload", "github", "npm", "remix"]] = None
    source_url: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None
    dependencies: Optional[List[str]] = None
    version: Optional[str] = Field(None, max_length=20)
    accessibility_score: Optional[int] = Field(None, ge=0, le=100)
    is_public: Optional[bool] = None


class MetricRequest(BaseModel):
    """지표 액션 요청 (액션 값 검증은 서비스에서 400으로 처리)"""

    action: str = Field(..., description="view, download, copy, like, unlike")
