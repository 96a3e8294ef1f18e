"""
Announcement Endpoints.

Announcements are posts addressed to a school, to all staff or to everyone.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query, Response, status

from lockerroom.core.database.entities.posts import Post
from lockerroom.core.models.io.posts import AnnouncementCreate, PostRead
from lockerroom.server.services import announcements as announcement_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["announcements"])


@router.post(
    "",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Announcement",
    description=(
        "School admins announce to their own school (`scope=school`). "
        "System admins may also use `global` and `staff`."
    ),
    responses={
        201: {"description": "Announcement created and audience notified"},
        400: {"description": "Unknown scope"},
        403: {"description": "Caller may not announce to this audience"},
    },
)
async def create_announcement(body: AnnouncementCreate, user: CurrentUserDep, repos: ReposDep) -> Post:
    return await announcement_service.create_announcement(repos, user, body)


@router.get("", response_model=List[PostRead], summary="List Announcements")
async def list_announcements(
    user: CurrentUserDep, repos: ReposDep, limit: int = Query(50, ge=1, le=200)
) -> List[Post]:
    """Announcements visible to the caller, newest first."""
    return await announcement_service.list_announcements(repos, user, limit=limit)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Announcement")
async def delete_announcement(post_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await announcement_service.delete_announcement(repos, user, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
