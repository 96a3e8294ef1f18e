"""
Request Dependencies.

Resolves the repository bundle and the authenticated user for API endpoints.
Tokens are read from the ``Authorization: Bearer <token>`` header.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle, get_repos
from lockerroom.core.errors import AuthenticationError
from lockerroom.core.models.domain.roles import Role
from lockerroom.server.services.auth import authenticate_token, ensure_roles

bearer_scheme = HTTPBearer(auto_error=False)

ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]


async def get_optional_user(
    repos: ReposDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[User]:
    """The authenticated user, or None for anonymous requests."""
    if credentials is None:
        return None
    return await authenticate_token(repos, credentials.credentials)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]


def require_roles(*roles: Role) -> Callable:
    """
    Build a dependency that only lets the given roles (and system admins) through.

    Example:
        ``admin: User = Depends(require_roles(Role.finance))``
    """

    async def dependency(user: CurrentUserDep) -> User:
        ensure_roles(user, *roles)
        return user

    return dependency
