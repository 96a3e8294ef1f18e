"""
Post and engagement repositories.

Feed queries live on :class:`PostRepository`. Likes, comments, views and
saves share :class:`PostEngagementRepository`, which answers the batched
count and "did this viewer ..." questions the feed needs for a whole page
at once.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Generic, Iterable, List, Optional, Set, Type

from sqlalchemy import and_, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.posts import Post, PostComment, PostLike, PostView, ReportedPost, SavedPost
from .base import EntityType, QueryBuilder, SqlRepository


def _has_content():
    return or_(
        and_(Post.media_url.is_not(None), Post.media_url != ""),
        and_(Post.caption.is_not(None), Post.caption != ""),
    )


class PostRepository(SqlRepository[Post]):
    """Repository for posts and announcements."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Post)

    async def list_feed(
        self,
        limit: int,
        offset: int = 0,
        author_ids: Optional[Iterable[str]] = None,
    ) -> List[Post]:
        """List feed-eligible posts newest first.

        Processing posts, announcements and posts with neither media nor
        caption are never returned.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            author_ids: Restrict to these authors

        Returns:
            List of Post instances
        """
        stmt = select(Post).where(Post.type == "post", Post.status != "processing", _has_content())
        if author_ids is not None:
            ids = list(author_ids)
            if not ids:
                return []
            stmt = stmt.where(Post.author_id.in_(ids))
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_student(self, student_id: str, limit: Optional[int] = None, offset: Optional[int] = None) -> List[Post]:
        stmt = select(Post).where(Post.student_id == student_id, Post.type == "post")
        stmt = QueryBuilder.apply_pagination(stmt.order_by(Post.created_at.desc()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_announcements(
        self,
        school_id: Optional[str],
        include_staff: bool,
        include_all_schools: bool,
        limit: Optional[int] = None,
    ) -> List[Post]:
        """List announcements visible for the given audience flags."""
        visible = [Post.scope == "global"]
        if include_staff:
            visible.append(Post.scope == "staff")
        if include_all_schools:
            visible.append(Post.scope == "school")
        elif school_id is not None:
            visible.append(and_(Post.scope == "school", Post.school_id == school_id))
        stmt = (
            select(Post)
            .where(Post.type == "announcement", or_(*visible))
            .order_by(Post.created_at.desc())
        )
        stmt = QueryBuilder.apply_pagination(stmt, limit, None)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def ids_for(self, school_id: Optional[str] = None, student_id: Optional[str] = None) -> List[str]:
        stmt = QueryBuilder.apply_filters(
            select(Post.id).where(Post.type == "post"),
            Post,
            {"school_id": school_id, "student_id": student_id},
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def detach_student(self, student_id: str) -> None:
        """Clear the student link on posts; authorship is kept."""
        await self.session.execute(update(Post).where(Post.student_id == student_id).values(student_id=None))

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(Post)
            .where(Post.type == "post", Post.created_at >= start, Post.created_at < end)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class PostEngagementRepository(SqlRepository[EntityType], Generic[EntityType]):
    """Shared queries for rows keyed by ``(post_id, user_id)``."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        super().__init__(session, model)

    async def get_pair(self, post_id: str, user_id: str) -> Optional[EntityType]:
        stmt = select(self.model).where(self.model.post_id == post_id, self.model.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def counts_for_posts(self, post_ids: Iterable[str]) -> Dict[str, int]:
        """Number of rows per post for the given posts."""
        ids = list(post_ids)
        if not ids:
            return {}
        stmt = (
            select(self.model.post_id, func.count())
            .where(self.model.post_id.in_(ids))
            .group_by(self.model.post_id)
        )
        result = await self.session.execute(stmt)
        return {post_id: int(count) for post_id, count in result.all()}

    async def posts_marked_by(self, user_id: str, post_ids: Iterable[str]) -> Set[str]:
        """Subset of ``post_ids`` that have a row for ``user_id``."""
        ids = list(post_ids)
        if not ids:
            return set()
        stmt = select(self.model.post_id).where(self.model.user_id == user_id, self.model.post_id.in_(ids))
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def total_for_posts(self, post_ids: Iterable[str]) -> int:
        ids = list(post_ids)
        if not ids:
            return 0
        stmt = select(func.count()).select_from(self.model).where(self.model.post_id.in_(ids))
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def delete_for_post(self, post_id: str) -> None:
        result = await self.session.execute(select(self.model).where(self.model.post_id == post_id))
        for row in result.scalars().all():
            await self.session.delete(row)


class PostLikeRepository(PostEngagementRepository[PostLike]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PostLike)


class PostViewRepository(PostEngagementRepository[PostView]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PostView)


class PostCommentRepository(PostEngagementRepository[PostComment]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PostComment)

    async def list_for_post(self, post_id: str, limit: Optional[int] = None, offset: Optional[int] = None) -> List[PostComment]:
        """Comments on a post, oldest first."""
        stmt = select(PostComment).where(PostComment.post_id == post_id).order_by(PostComment.created_at, PostComment.id)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class SavedPostRepository(PostEngagementRepository[SavedPost]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SavedPost)

    async def saved_post_ids(self, user_id: str) -> List[str]:
        stmt = select(SavedPost.post_id).where(SavedPost.user_id == user_id).order_by(SavedPost.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ReportedPostRepository(SqlRepository[ReportedPost]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ReportedPost)

    async def delete_for_post(self, post_id: str) -> None:
        result = await self.session.execute(select(ReportedPost).where(ReportedPost.post_id == post_id))
        for row in result.scalars().all():
            await self.session.delete(row)
