"""
검색 인덱스 설정 (검색 속성, facet, 사용자 정의 랭킹, 반환/하이라이트 속성)

scripts/configure_search_index.py가 한 번 적용합니다.
"""

from componentvault.search.changes import (
    COLLECTIONS_INDEX,
    COMPONENTS_INDEX,
    USERS_INDEX,
)

COMPONENTS_SETTINGS = {
    # 중요도 순
    "searchableAttributes": [
        "name",
        "description",
        "tags",
        "category",
        "authorName",
    ],
    "attributesForFaceting": [
        "category",
        "framework",
        "frameworks",
        "tags",
        "isPremium",
        "isPublished",
        "authorId",
    ],
    "customRanking": [
        "desc(downloads)",
        "desc(likes)",
        "desc(favorites)",
        "desc(accessibilityScore)",
        "desc(views)",
    ],
    "attributesToRetrieve": [
        "name",
        "description",
        "category",
        "tags",
        "framework",
        "frameworks",
        "thumbnail",
        "authorName",
        "authorId",
        "downloads",
        "likes",
        "favorites",
        "views",
        "accessibilityScore",
        "isPremium",
        "isPublished",
    ],
    "attributesToHighlight": ["name", "description", "tags"],
    "attributesToSnippet": ["description:30"],
    "hitsPerPage": 20,
    "typoTolerance": True,
    "minWordSizefor1Typo": 4,
    "minWordSizefor2Typos": 8,
    "removeWordsIfNoResults": "lastWords",
    "exactOnSingleWordQuery": "attribute",
}

USERS_SETTINGS = {
    "searchableAttributes": ["displayName", "username", "bio", "location"],
    "attributesForFaceting": ["isVerified", "location"],
    "customRanking": ["desc(componentsCount)", "desc(followersCount)"],
    "attributesToRetrieve": [
        "displayName",
        "username",
        "avatar",
        "bio",
        "location",
        "website",
        "componentsCount",
        "followersCount",
        "isVerified",
    ],
    "attributesToHighlight": ["displayName", "username", "bio"],
    "hitsPerPage": 20,
}

COLLECTIONS_SETTINGS = {
    "searchableAttributes": ["name", "description", "tags", "authorName"],
    "attributesForFaceting": ["isPublic", "tags", "authorId"],
    "customRanking": ["desc(likes)", "desc(views)", "desc(componentsCount)"],
    "attributesToRetrieve": [
        "name",
        "description",
        "tags",
        "thumbnail",
        "authorName",
        "authorId",
        "componentsCount",
        "likes",
        "views",
        "isPublic",
    ],
    "attributesToHighlight": ["name", "description"],
    "hitsPerPage": 20,
}

INDEX_SETTINGS = {
    COMPONENTS_INDEX: COMPONENTS_SETTINGS,
    USERS_INDEX: USERS_SETTINGS,
    COLLECTIONS_INDEX: COLLECTIONS_SETTINGS,
}
