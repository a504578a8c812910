"""
저장소 문서 → 검색 객체 변환

각 변환 함수는 고정된 필드만 선택하고 모든 선택 필드에 기본값을 적용합니다.
결과 객체에는 None 값이 절대 포함되지 않으며, 타임스탬프는 epoch 초(int)로 평탄화됩니다.
"""

import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from componentvault.search.changes import (
    COLLECTIONS_INDEX,
    COMPONENTS_INDEX,
    USERS_INDEX,
)
from componentvault.utils.timeutils import ensure_aware


def to_epoch_seconds(value: Any, now: Optional[float] = None) -> int:
    """
    타임스탬프 값을 epoch 초로 변환

    우선순위: {"_seconds"|"seconds": n} 구조 → datetime → 양수 숫자 → 현재 시각
    """
    if isinstance(value, dict):
        for key in ("_seconds", "seconds"):
            seconds = value.get(key)
            if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
                return int(seconds)
    elif isinstance(value, datetime):
        return int(ensure_aware(value).timestamp())
    elif (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value > 0
    ):
        return int(value)

    return int(now if now is not None else time.time())


def _author_of(doc: Dict[str, Any]) -> Dict[str, Any]:
    author = doc.get("author")
    if isinstance(author, dict):
        return {key: value for key, value in author.items() if value is not None}

    fields = {
        "id": doc.get("author_id"),
        "name": doc.get("author_name"),
        "avatar": doc.get("author_avatar"),
    }
    return {key: value for key, value in fields.items() if value is not None}


def project_component(
    object_id: str, doc: Dict[str, Any], now: Optional[float] = None
) -> Dict[str, Any]:
    return {
        "objectID": str(object_id),
        "name": doc.get("name") or doc.get("title") or "",
        "description": doc.get("description") or "",
        "category": doc.get("category") or "",
        "tags": list(doc.get("tags") or []),
        "framework": doc.get("framework") or "react",
        "frameworks": list(doc.get("frameworks") or []),
        # 레거시 문서는 downloads 대신 copies만 가질 수 있음
        "downloads": doc.get("downloads") or doc.get("copies") or 0,
        "likes": doc.get("likes") or 0,
        "favorites": doc.get("favorites") or doc.get("likes") or 0,
        "views": doc.get("views") or 0,
        "author": _author_of(doc),
        "authorId": doc.get("author_id") or "",
        "authorName": doc.get("author_name") or "",
        "thumbnail": doc.get("thumbnail_image") or doc.get("preview_image") or "",
        "accessibilityScore": doc.get("accessibility_score") or 0,
        "isPremium": bool(doc.get("is_premium") or False),
        "isPublished": doc.get("is_public") is not False,
        "createdAt": to_epoch_seconds(doc.get("created_at"), now),
        "updatedAt": to_epoch_seconds(doc.get("updated_at"), now),
    }


def project_user(
    object_id: str, doc: Dict[str, Any], now: Optional[float] = None
) -> Dict[str, Any]:
    return {
        "objectID": str(object_id),
        "displayName": doc.get("display_name") or "",
        "username": doc.get("username") or "",
        "email": doc.get("email") or "",
        "bio": doc.get("bio") or "",
        "location": doc.get("location") or "",
        "website": doc.get("website") or "",
        "avatar": doc.get("avatar") or doc.get("photo_url") or "",
        "componentsCount": doc.get("total_components") or 0,
        "followersCount": doc.get("followers") or 0,
        "followingCount": doc.get("following") or 0,
        "isVerified": bool(doc.get("is_verified") or False),
        "createdAt": to_epoch_seconds(doc.get("created_at"), now),
    }


def project_collection(
    object_id: str, doc: Dict[str, Any], now: Optional[float] = None
) -> Dict[str, Any]:
    component_ids = [str(cid) for cid in (doc.get("component_ids") or [])]
    return {
        "objectID": str(object_id),
        "name": doc.get("name") or "",
        "description": doc.get("description") or "",
        "tags": list(doc.get("tags") or []),
        "componentIds": component_ids,
        "componentsCount": len(component_ids),
        "authorId": doc.get("user_id") or "",
        "authorName": doc.get("user_name") or "",
        "thumbnail": doc.get("cover_image") or "",
        "isPublic": doc.get("is_public") is not False,
        "likes": doc.get("likes") or 0,
        "views": doc.get("views") or 0,
        "createdAt": to_epoch_seconds(doc.get("created_at"), now),
        "updatedAt": to_epoch_seconds(doc.get("updated_at"), now),
    }


PROJECTIONS: Dict[str, Callable[..., Dict[str, Any]]] = {
    COMPONENTS_INDEX: project_component,
    USERS_INDEX: project_user,
    COLLECTIONS_INDEX: project_collection,
}


def project(index: str, object_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
    """인덱스 이름에 맞는 projection 적용"""
    try:
        projection = PROJECTIONS[index]
    except KeyError:
        raise ValueError(f"Unknown search index: {index}") from None
    return projection(object_id, doc)
