"""
Post and Feed Endpoints.

Cursor paginated feeds, post creation by students and per-post engagement
(likes, saves, comments, views and reports).
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from lockerroom.core.database.entities.posts import Post, PostComment, ReportedPost
from lockerroom.core.models.io.posts import (
    CommentCreate,
    CommentRead,
    EngagementState,
    FeedItem,
    FeedPage,
    PostCreate,
    PostRead,
    ReportCreate,
    ReportRead,
)
from lockerroom.server.services import feed as feed_service
from lockerroom.server.services.deps import CurrentUserDep, OptionalUserDep, ReposDep

router = APIRouter(tags=["posts"])


@router.get(
    "/feed",
    response_model=FeedPage,
    summary="Get Feed",
    description="Newest posts first. Pass the previous page's `next_cursor` to continue.",
    responses={400: {"description": "Invalid cursor"}},
)
async def get_feed(
    repos: ReposDep,
    viewer: OptionalUserDep,
    limit: Optional[int] = Query(None, ge=1),
    cursor: Optional[str] = None,
):
    """
    One page of the global feed.

    - **limit**: Page size (default 20, at most 50).
    - **cursor**: Opaque cursor returned by the previous page.

    Items carry engagement counts and, for authenticated callers, the
    `is_liked`, `is_saved` and `is_following_author` flags.
    """
    return await feed_service.get_feed(repos, viewer, limit=limit, cursor=cursor)


@router.get("/following", response_model=FeedPage, summary="Get Following Feed")
async def get_following_feed(
    repos: ReposDep,
    user: CurrentUserDep,
    limit: Optional[int] = Query(None, ge=1),
    cursor: Optional[str] = None,
):
    return await feed_service.get_following_feed(repos, user, limit=limit, cursor=cursor)


@router.post(
    "",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="Publish a post. Students only; a media URL or a caption is required.",
    responses={
        201: {"description": "Post created"},
        400: {"description": "Neither media nor caption given, or unknown media type"},
        403: {"description": "Caller is not a student"},
    },
)
async def create_post(body: PostCreate, user: CurrentUserDep, repos: ReposDep) -> Post:
    return await feed_service.create_post(repos, user, body)


@router.get("/saved", response_model=List[FeedItem], summary="List Saved Posts")
async def list_saved(user: CurrentUserDep, repos: ReposDep):
    return await feed_service.list_saved(repos, user)


@router.get("/students/{student_id}", response_model=List[FeedItem], summary="List Student Posts")
async def list_student_posts(student_id: str, repos: ReposDep, viewer: OptionalUserDep):
    return await feed_service.list_student_posts(repos, viewer, student_id)


@router.get(
    "/{post_id}",
    response_model=FeedItem,
    summary="Get Post",
    responses={404: {"description": "Post not found"}},
)
async def get_post(post_id: str, repos: ReposDep, viewer: OptionalUserDep):
    return await feed_service.get_post(repos, viewer, post_id)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Post",
    description="Delete a post with its likes, comments, saves, views and reports. Author or system admin only.",
)
async def delete_post(post_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await feed_service.delete_post(repos, user, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/like", response_model=EngagementState, summary="Like Post")
async def like(post_id: str, user: CurrentUserDep, repos: ReposDep):
    return await feed_service.like(repos, user, post_id)


@router.delete("/{post_id}/like", response_model=EngagementState, summary="Unlike Post")
async def unlike(post_id: str, user: CurrentUserDep, repos: ReposDep):
    return await feed_service.unlike(repos, user, post_id)


@router.post("/{post_id}/save", response_model=EngagementState, summary="Save Post")
async def save(post_id: str, user: CurrentUserDep, repos: ReposDep):
    return await feed_service.save(repos, user, post_id)


@router.delete("/{post_id}/save", response_model=EngagementState, summary="Unsave Post")
async def unsave(post_id: str, user: CurrentUserDep, repos: ReposDep):
    return await feed_service.unsave(repos, user, post_id)


@router.get("/{post_id}/comments", response_model=List[CommentRead], summary="List Comments")
async def list_comments(post_id: str, repos: ReposDep):
    return await feed_service.list_comments(repos, post_id)


@router.post(
    "/{post_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Comment",
    responses={400: {"description": "Empty comment or longer than 2000 characters"}},
)
async def add_comment(post_id: str, body: CommentCreate, user: CurrentUserDep, repos: ReposDep) -> PostComment:
    return await feed_service.comment(repos, user, post_id, body.content)


@router.post("/{post_id}/view", summary="Record View")
async def record_view(post_id: str, user: CurrentUserDep, repos: ReposDep):
    """Record that the caller viewed the post. Only the first view per user counts."""
    return {"recorded": await feed_service.record_view(repos, user, post_id)}


@router.post(
    "/{post_id}/report",
    response_model=ReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Report Post",
)
async def report(post_id: str, body: ReportCreate, user: CurrentUserDep, repos: ReposDep) -> ReportedPost:
    return await feed_service.report(repos, user, post_id, body.reason)
