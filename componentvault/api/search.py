"""
Search API Endpoints

Provides store-side component search and full search index resync.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.middleware.auth import get_current_user_id
from componentvault.models.base import get_db
from componentvault.search.dependencies import get_synchronizer
from componentvault.search.synchronizer import SearchIndexSynchronizer
from componentvault.services.search_service import SearchService
from componentvault.utils.logging import audit_logger

router = APIRouter(prefix="/v1/search", tags=["search"])


@router.get("")
async def search_components(
    q: str = Query(..., min_length=1, max_length=200, description="Search query"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    db: AsyncSession = Depends(get_db),
):
    """
    Search public components by title, description, or tag.

    Fallback for clients that cannot reach the hosted search index.
    """
    components = await SearchService(db).search_components(q, limit=limit)
    return [component.to_dict(include_code=False) for component in components]


@router.post("/resync")
async def resync_search_index(
    user_id: str = Depends(get_current_user_id),
    synchronizer: SearchIndexSynchronizer = Depends(get_synchronizer),
    db: AsyncSession = Depends(get_db),
):
    """
    Rebuild every search index from the store.

    Returns per-index document counts. Any failure yields a generic 500.
    """
    results = await synchronizer.resync_all(db)
    audit_logger.log_search_resync(user_id, results)

    return {
        "success": True,
        "message": "All data synced to search index",
        "results": results,
    }
