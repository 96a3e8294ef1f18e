"""
Search Service.

Platform-wide athlete search. The query is matched against student names,
sports and positions on every school; the most followed athletes come first.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.io.schools import StudentRead

logger = get_logger(__name__)

MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 50
DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 25

_SEARCHABLE = re.compile(r"[a-zA-Z0-9\s.'-]")


def normalize_query(q: Optional[str]) -> str:
    """Strip ``q`` and check its length and characters.

    Raises:
        DomainValidationError: If the query is missing, too short, too long
            or has no searchable character.
    """
    term = (q or "").strip()
    if not MIN_QUERY_LENGTH <= len(term) <= MAX_QUERY_LENGTH:
        raise DomainValidationError(
            f"Search query must be between {MIN_QUERY_LENGTH} and {MAX_QUERY_LENGTH} characters"
        )
    if not _SEARCHABLE.search(term):
        raise DomainValidationError("Search query has no searchable characters")
    return term


async def search_students(
    repos: SqlRepoBundle,
    q: Optional[str],
    viewer: Optional[User] = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> List[Dict[str, Any]]:
    """
    Find athletes by name, sport or position.

    Args:
        repos: Repository bundle
        q: Free-text query, 2 to 50 characters after stripping
        viewer: Caller, used to flag athletes they already follow
        limit: Maximum results, 1 to 25

    Returns:
        Student profiles with ``school_name``, ``followers_count`` and
        ``is_following``

    Raises:
        DomainValidationError: On an invalid query or limit.
    """
    term = normalize_query(q)
    if not 1 <= limit <= MAX_SEARCH_LIMIT:
        raise DomainValidationError(f"limit must be between 1 and {MAX_SEARCH_LIMIT}")

    rows = await repos.students.search_ranked(term, limit)
    followed = set()
    if viewer is not None:
        followed = await repos.follows.followed_among(viewer.id, {student.user_id for student, _, _ in rows})

    logger.debug(f"Student search {term!r} returned {len(rows)} result(s)")
    return [
        {
            **StudentRead.model_validate(student).model_dump(),
            "school_name": school_name,
            "followers_count": followers_count,
            "is_following": student.user_id in followed,
        }
        for student, school_name, followers_count in rows
    ]
