"""
User and Follow Endpoints.

The caller's own account, public profiles, the follow graph and staff
account administration.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from lockerroom.core.database.entities.users import User
from lockerroom.core.models.domain.roles import Role
from lockerroom.core.models.io.users import (
    ChangePasswordRequest,
    FollowCounts,
    FrozenUpdate,
    StaffCreate,
    UserProfile,
    UserRead,
    UserSummary,
    UserUpdate,
)
from lockerroom.server.services import auth as auth_service
from lockerroom.server.services import follows as follow_service
from lockerroom.server.services import users as user_service
from lockerroom.server.services.deps import CurrentUserDep, OptionalUserDep, ReposDep, require_roles

router = APIRouter(tags=["users"])


@router.get("/me", response_model=UserRead, summary="Get Current User")
async def get_me(user: CurrentUserDep) -> User:
    return user


@router.patch(
    "/me",
    response_model=UserRead,
    summary="Update Profile",
    description="Update the caller's name, bio or profile picture. Students' athlete profiles are kept in sync.",
)
async def update_me(body: UserUpdate, user: CurrentUserDep, repos: ReposDep) -> User:
    return await user_service.update_profile(repos, user, body)


@router.post(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change Password",
    responses={400: {"description": "Current password is wrong or new password too short"}},
)
async def change_password(body: ChangePasswordRequest, user: CurrentUserDep, repos: ReposDep) -> Response:
    await auth_service.change_password(
        repos, user, current_password=body.current_password, new_password=body.new_password
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=List[UserRead],
    summary="List Users",
    description="List accounts, optionally filtered by role. System admins and support only.",
)
async def list_users(
    repos: ReposDep,
    user: CurrentUserDep,
    role: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> List[User]:
    return await user_service.list_users(repos, user, role=role, limit=limit, offset=offset)


@router.post(
    "/staff",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Staff Account",
    description="Create a scout, moderator, finance, support, coach or analyst account.",
    responses={
        201: {"description": "Account created"},
        400: {"description": "Role is not a staff role"},
        403: {"description": "Caller is not a system admin"},
        409: {"description": "E-mail already registered"},
    },
)
async def create_staff(
    body: StaffCreate, repos: ReposDep, admin: User = Depends(require_roles(Role.system_admin))
) -> User:
    return await user_service.create_staff_user(
        repos, admin, email=body.email, password=body.password, name=body.name, role=body.role
    )


@router.get(
    "/{user_id}",
    response_model=UserProfile,
    summary="Get Profile",
    description="Public profile with follower counts and, for students, the athlete profile.",
    responses={404: {"description": "User not found"}},
)
async def get_profile(user_id: str, repos: ReposDep, viewer: OptionalUserDep):
    return await user_service.get_profile(repos, user_id, viewer)


@router.patch(
    "/{user_id}/frozen",
    response_model=UserRead,
    summary="Freeze or Unfreeze Account",
    description="Frozen accounts cannot log in or use existing tokens.",
)
async def set_frozen(user_id: str, body: FrozenUpdate, repos: ReposDep, admin: CurrentUserDep) -> User:
    return await user_service.set_frozen(repos, admin, user_id, body.is_frozen)


@router.post(
    "/{user_id}/follow",
    response_model=FollowCounts,
    summary="Follow User",
    description="Follow a user. Following someone you already follow is a no-op.",
    responses={
        400: {"description": "Users cannot follow themselves"},
        404: {"description": "User not found"},
    },
)
async def follow(user_id: str, user: CurrentUserDep, repos: ReposDep) -> FollowCounts:
    await follow_service.follow(repos, user, user_id)
    followers, following = await follow_service.follow_counts(repos, user_id)
    return FollowCounts(followers_count=followers, following_count=following)


@router.delete("/{user_id}/follow", response_model=FollowCounts, summary="Unfollow User")
async def unfollow(user_id: str, user: CurrentUserDep, repos: ReposDep) -> FollowCounts:
    await follow_service.unfollow(repos, user, user_id)
    followers, following = await follow_service.follow_counts(repos, user_id)
    return FollowCounts(followers_count=followers, following_count=following)


@router.get("/{user_id}/followers", response_model=List[UserSummary], summary="List Followers")
async def list_followers(user_id: str, repos: ReposDep) -> List[User]:
    await user_service.get_user(repos, user_id)
    return await follow_service.list_followers(repos, user_id)


@router.get("/{user_id}/following", response_model=List[UserSummary], summary="List Following")
async def list_following(user_id: str, repos: ReposDep) -> List[User]:
    await user_service.get_user(repos, user_id)
    return await follow_service.list_following(repos, user_id)
