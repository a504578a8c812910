"""
사용자/프로필 API Pydantic 스키마
"""

from typing import Optional

from pydantic import BaseModel, Field


class ProfileUpdateRequest(BaseModel):
    """프로필 수정 요청 (전달된 필드만 반영)"""

    display_name: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(
        None, min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$"
    )
    photo_url: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = Field(None, max_length=1000)
    website: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=100)
    github: Optional[str] = Field(None, max_length=100)
    twitter: Optional[str] = Field(None, max_length=100)
