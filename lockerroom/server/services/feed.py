"""
Post and Feed Service.

Students publish posts; everyone browses them in a newest-first feed.
Feed pages are addressed by an opaque cursor and every item carries its
engagement counts plus the viewer's own like/save/follow flags.

Feed eligibility:
- ``type == 'post'`` (announcements have their own listing)
- ``status != 'processing'``
- has a media URL or a caption
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from lockerroom.core.database.entities.posts import Post, PostComment, PostLike, PostView, ReportedPost, SavedPost
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError, NotFoundError, PermissionDeniedError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import MediaType, NotificationType, PostStatus, PostType
from lockerroom.core.models.domain.roles import Role, is_system_admin
from lockerroom.core.models.io.posts import PostCreate
from lockerroom.core.models.io.users import UserSummary
from lockerroom.server.services import notifications

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50
MAX_COMMENT_LENGTH = 2000

T = TypeVar("T")


def dedupe_by_id(items: Iterable[T]) -> List[T]:
    """
    Drop items whose id was already seen, keeping the first occurrence.

    Works with objects exposing ``id`` and with dicts keyed by ``"id"``.
    """
    seen: set[Any] = set()
    unique: List[T] = []
    for item in items:
        key = item["id"] if isinstance(item, dict) else getattr(item, "id")
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def encode_cursor(offset: int) -> str:
    return base64.urlsafe_b64encode(f"o:{offset}".encode()).decode().rstrip("=")


def decode_cursor(cursor: Optional[str]) -> int:
    """
    Decode a feed cursor into an offset.

    Raises:
        DomainValidationError: If the cursor was not produced by :func:`encode_cursor`.
    """
    if not cursor:
        return 0
    try:
        raw = base64.urlsafe_b64decode(cursor + "=" * (-len(cursor) % 4)).decode()
        prefix, value = raw.split(":", 1)
        offset = int(value)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise DomainValidationError("Invalid feed cursor") from e
    if prefix != "o" or offset < 0:
        raise DomainValidationError("Invalid feed cursor")
    return offset


def is_feed_eligible(post: Post) -> bool:
    """Whether ``post`` may be shown in feeds, saved lists and detail views."""
    return (
        post.type == PostType.post.value
        and post.status != PostStatus.processing.value
        and bool(post.media_url or post.caption)
    )


def _clamp_limit(limit: Optional[int]) -> int:
    if not limit or limit < 1:
        return DEFAULT_PAGE_SIZE
    return min(limit, MAX_PAGE_SIZE)


async def decorate_posts(repos: SqlRepoBundle, viewer: Optional[User], posts: List[Post]) -> List[Dict[str, Any]]:
    """
    Attach authors, engagement counts and viewer flags to a page of posts.

    Counts are fetched in one grouped query per engagement kind.
    """
    posts = dedupe_by_id(posts)
    post_ids = [p.id for p in posts]
    authors = await repos.users.get_many(p.author_id for p in posts)
    likes = await repos.likes.counts_for_posts(post_ids)
    comments = await repos.comments.counts_for_posts(post_ids)
    saves = await repos.saved_posts.counts_for_posts(post_ids)
    views = await repos.views.counts_for_posts(post_ids)

    liked: set[str] = set()
    saved: set[str] = set()
    followed: set[str] = set()
    if viewer is not None:
        liked = await repos.likes.posts_marked_by(viewer.id, post_ids)
        saved = await repos.saved_posts.posts_marked_by(viewer.id, post_ids)
        followed = await repos.follows.followed_among(viewer.id, {p.author_id for p in posts})

    items = []
    for post in posts:
        author = authors.get(post.author_id)
        item = post.model_dump()
        item.update(
            author=UserSummary.model_validate(author) if author else None,
            likes_count=likes.get(post.id, 0),
            comments_count=comments.get(post.id, 0),
            saves_count=saves.get(post.id, 0),
            views_count=views.get(post.id, 0),
            is_liked=post.id in liked,
            is_saved=post.id in saved,
            is_following_author=post.author_id in followed,
        )
        items.append(item)
    return items


async def _page(
    repos: SqlRepoBundle,
    viewer: Optional[User],
    limit: Optional[int],
    cursor: Optional[str],
    author_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    size = _clamp_limit(limit)
    offset = decode_cursor(cursor)
    # One extra row tells us whether another page exists
    posts = await repos.posts.list_feed(limit=size + 1, offset=offset, author_ids=author_ids)
    has_more = len(posts) > size
    posts = posts[:size]
    return {
        "items": await decorate_posts(repos, viewer, posts),
        "next_cursor": encode_cursor(offset + size) if has_more else None,
        "has_more": has_more,
    }


async def get_feed(
    repos: SqlRepoBundle, viewer: Optional[User], limit: Optional[int] = None, cursor: Optional[str] = None
) -> Dict[str, Any]:
    """
    One page of the global feed.

    Args:
        repos: Repository bundle bound to the request session.
        viewer: The caller, used for the per-item flags.
        limit: Page size, clamped to ``[1, 50]``.
        cursor: Opaque cursor from the previous page's ``next_cursor``.

    Returns:
        ``{"items": [...], "next_cursor": str | None, "has_more": bool}``
    """
    return await _page(repos, viewer, limit, cursor)


async def get_following_feed(
    repos: SqlRepoBundle, viewer: User, limit: Optional[int] = None, cursor: Optional[str] = None
) -> Dict[str, Any]:
    following = await repos.follows.following_ids(viewer.id)
    return await _page(repos, viewer, limit, cursor, author_ids=following)


async def create_post(repos: SqlRepoBundle, author: User, data: PostCreate) -> Post:
    """
    Publish a post as a student.

    Raises:
        PermissionDeniedError: If the author is not a student with a profile.
        DomainValidationError: If the post has neither media nor caption, or an unknown media type.
    """
    if author.role != Role.student.value:
        raise PermissionDeniedError("Only students can create posts")
    student = await repos.students.get_by_user_id(author.id)
    if student is None:
        raise PermissionDeniedError("Student profile not found")

    media_url = (data.media_url or "").strip() or None
    caption = (data.caption or "").strip() or None
    if media_url is None and caption is None:
        raise DomainValidationError("A post needs media or a caption")
    media_type = None
    if media_url is not None:
        try:
            media_type = MediaType(data.media_type or MediaType.image).value
        except ValueError as e:
            raise DomainValidationError(f"Unsupported media type '{data.media_type}'") from e

    post = await repos.posts.create(
        Post(
            author_id=author.id,
            student_id=student.id,
            school_id=student.school_id,
            media_url=media_url,
            media_type=media_type,
            caption=caption,
            status=PostStatus.ready.value,
            type=PostType.post.value,
        )
    )
    followers = await repos.follows.follower_ids(author.id)
    await notifications.notify_many(
        repos,
        followers,
        NotificationType.following_posted,
        "New post",
        f"{author.name} shared a new post",
        entity_type="post",
        entity_id=post.id,
        related_user_id=author.id,
    )
    logger.debug(f"Post {post.id} created by {author.id}, {len(followers)} followers notified")
    return post


async def _get_feed_post(repos: SqlRepoBundle, post_id: str) -> Post:
    post = await repos.posts.get_by_id(post_id)
    if post is None:
        raise NotFoundError("Post", post_id)
    return post


async def get_post(repos: SqlRepoBundle, viewer: Optional[User], post_id: str) -> Dict[str, Any]:
    """
    One post with its engagement counts.

    Posts outside the feed are hidden from everyone but their author and
    system admins.
    """
    post = await _get_feed_post(repos, post_id)
    if not is_feed_eligible(post):
        privileged = viewer is not None and (viewer.id == post.author_id or is_system_admin(viewer.role))
        if not privileged:
            raise NotFoundError("Post", post_id)
    return (await decorate_posts(repos, viewer, [post]))[0]


async def list_student_posts(repos: SqlRepoBundle, viewer: Optional[User], student_id: str) -> List[Dict[str, Any]]:
    if await repos.students.get_by_id(student_id) is None:
        raise NotFoundError("Student", student_id)
    return await decorate_posts(repos, viewer, await repos.posts.list_by_student(student_id))


async def delete_post(repos: SqlRepoBundle, user: User, post_id: str) -> None:
    post = await _get_feed_post(repos, post_id)
    if post.author_id != user.id and not is_system_admin(user.role):
        raise PermissionDeniedError("You can only delete your own posts")
    for repo in (repos.likes, repos.comments, repos.views, repos.saved_posts, repos.reports):
        await repo.delete_for_post(post.id)
    await repos.session.delete(post)
    await repos.session.commit()
    logger.info(f"Post {post_id} deleted by {user.id}")


async def like(repos: SqlRepoBundle, user: User, post_id: str) -> Dict[str, Any]:
    post = await _get_feed_post(repos, post_id)
    if await repos.likes.get_pair(post.id, user.id) is None:
        await repos.likes.create(PostLike(post_id=post.id, user_id=user.id))
        if post.author_id != user.id:
            await notifications.notify(
                repos,
                post.author_id,
                NotificationType.post_liked,
                "New like",
                f"{user.name} liked your post",
                entity_type="post",
                entity_id=post.id,
                related_user_id=user.id,
            )
    counts = await repos.likes.counts_for_posts([post.id])
    return {"post_id": post.id, "active": True, "count": counts.get(post.id, 0)}


async def unlike(repos: SqlRepoBundle, user: User, post_id: str) -> Dict[str, Any]:
    post = await _get_feed_post(repos, post_id)
    existing = await repos.likes.get_pair(post.id, user.id)
    if existing is not None:
        await repos.likes.delete(existing.id)
    counts = await repos.likes.counts_for_posts([post.id])
    return {"post_id": post.id, "active": False, "count": counts.get(post.id, 0)}


async def save(repos: SqlRepoBundle, user: User, post_id: str) -> Dict[str, Any]:
    post = await _get_feed_post(repos, post_id)
    if await repos.saved_posts.get_pair(post.id, user.id) is None:
        await repos.saved_posts.create(SavedPost(post_id=post.id, user_id=user.id))
    counts = await repos.saved_posts.counts_for_posts([post.id])
    return {"post_id": post.id, "active": True, "count": counts.get(post.id, 0)}


async def unsave(repos: SqlRepoBundle, user: User, post_id: str) -> Dict[str, Any]:
    post = await _get_feed_post(repos, post_id)
    existing = await repos.saved_posts.get_pair(post.id, user.id)
    if existing is not None:
        await repos.saved_posts.delete(existing.id)
    counts = await repos.saved_posts.counts_for_posts([post.id])
    return {"post_id": post.id, "active": False, "count": counts.get(post.id, 0)}


async def comment(repos: SqlRepoBundle, user: User, post_id: str, content: str) -> PostComment:
    post = await _get_feed_post(repos, post_id)
    text = (content or "").strip()
    if not text:
        raise DomainValidationError("Comment cannot be empty")
    if len(text) > MAX_COMMENT_LENGTH:
        raise DomainValidationError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
    created = await repos.comments.create(PostComment(post_id=post.id, user_id=user.id, content=text))
    if post.author_id != user.id:
        await notifications.notify(
            repos,
            post.author_id,
            NotificationType.post_commented,
            "New comment",
            f"{user.name} commented on your post",
            entity_type="post",
            entity_id=post.id,
            related_user_id=user.id,
        )
    return created


async def list_comments(repos: SqlRepoBundle, post_id: str) -> List[Dict[str, Any]]:
    post = await _get_feed_post(repos, post_id)
    rows = await repos.comments.list_for_post(post.id)
    authors = await repos.users.get_many(c.user_id for c in rows)
    return [
        {**c.model_dump(), "author": UserSummary.model_validate(authors[c.user_id]) if c.user_id in authors else None}
        for c in rows
    ]


async def record_view(repos: SqlRepoBundle, user: User, post_id: str) -> bool:
    """Record that ``user`` viewed a post. Returns False when already recorded."""
    post = await _get_feed_post(repos, post_id)
    if await repos.views.get_pair(post.id, user.id) is not None:
        return False
    await repos.views.create(PostView(post_id=post.id, user_id=user.id))
    return True


async def report(repos: SqlRepoBundle, user: User, post_id: str, reason: str) -> ReportedPost:
    post = await _get_feed_post(repos, post_id)
    if not (reason or "").strip():
        raise DomainValidationError("A reason is required")
    created = await repos.reports.create(ReportedPost(post_id=post.id, reporter_id=user.id, reason=reason.strip()))
    logger.info(f"Post {post.id} reported by {user.id}")
    return created


async def list_saved(repos: SqlRepoBundle, user: User) -> List[Dict[str, Any]]:
    ids = await repos.saved_posts.saved_post_ids(user.id)
    posts = []
    for post_id in ids:
        post = await repos.posts.get_by_id(post_id)
        if post is not None and is_feed_eligible(post):
            posts.append(post)
    return await decorate_posts(repos, user, posts)
