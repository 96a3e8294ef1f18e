"""
Notification Endpoints.

The caller's notification inbox.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query, Response, status

from lockerroom.core.database.entities.notifications import Notification
from lockerroom.core.models.io.notifications import MarkAllReadResult, NotificationRead, UnreadCount
from lockerroom.server.services import notifications as notification_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["notifications"])


@router.get("", response_model=List[NotificationRead], summary="List Notifications")
async def list_notifications(
    user: CurrentUserDep,
    repos: ReposDep,
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> List[Notification]:
    """Newest first."""
    return await notification_service.list_notifications(
        repos, user, unread_only=unread_only, limit=limit, offset=offset
    )


@router.get("/unread-count", response_model=UnreadCount, summary="Count Unread Notifications")
async def unread_count(user: CurrentUserDep, repos: ReposDep) -> UnreadCount:
    return UnreadCount(count=await notification_service.unread_count(repos, user))


@router.post(
    "/read-all",
    response_model=MarkAllReadResult,
    summary="Mark All Read",
    description=(
        "Mark every unread notification of the caller as read. Idempotent; "
        "`updated` is the number of notifications that changed, so clients applying "
        "the change optimistically can reconcile against it."
    ),
)
async def mark_all_read(user: CurrentUserDep, repos: ReposDep) -> MarkAllReadResult:
    return MarkAllReadResult(updated=await notification_service.mark_all_read(repos, user))


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark Read",
    responses={404: {"description": "Notification not found or owned by another user"}},
)
async def mark_read(notification_id: str, user: CurrentUserDep, repos: ReposDep) -> Notification:
    return await notification_service.mark_read(repos, user, notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Notification")
async def delete_notification(notification_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await notification_service.delete_notification(repos, user, notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
