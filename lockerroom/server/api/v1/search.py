"""
Search Endpoints.

Platform-wide athlete discovery, open to anonymous visitors.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter

from lockerroom.core.models.io.schools import StudentSearchResult
from lockerroom.server.services import search as search_service
from lockerroom.server.services.deps import OptionalUserDep, ReposDep

router = APIRouter(tags=["search"])


@router.get(
    "/students",
    response_model=List[StudentSearchResult],
    summary="Search Athletes",
    description="Match student names, sports and positions across all schools, most followed first.",
    responses={400: {"description": "Query is not 2 to 50 characters or limit is outside 1 to 25"}},
)
async def search_students(
    repos: ReposDep,
    viewer: OptionalUserDep,
    q: Optional[str] = None,
    limit: int = search_service.DEFAULT_SEARCH_LIMIT,
):
    return await search_service.search_students(repos, q, viewer=viewer, limit=limit)
