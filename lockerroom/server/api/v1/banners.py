"""
Banner Endpoints.

Site-wide banners managed by system admins and shown to the roles (and
schools) they target.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Response, status

from lockerroom.core.database.entities.banners import Banner
from lockerroom.core.models.io.banners import BannerCreate, BannerRead, BannerUpdate
from lockerroom.server.services import banners as banner_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["banners"])


@router.get(
    "/active",
    response_model=List[BannerRead],
    summary="Get Active Banners",
    description="Banners currently shown to the caller, highest priority first.",
)
async def get_active_banners(user: CurrentUserDep, repos: ReposDep) -> List[Banner]:
    return await banner_service.active_banners(repos, user)


@router.get("", response_model=List[BannerRead], summary="List Banners")
async def list_banners(user: CurrentUserDep, repos: ReposDep) -> List[Banner]:
    return await banner_service.list_banners(repos, user)


@router.post(
    "",
    response_model=BannerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Banner",
    responses={400: {"description": "Unknown category or target role, or end date not after start date"}},
)
async def create_banner(body: BannerCreate, user: CurrentUserDep, repos: ReposDep) -> Banner:
    return await banner_service.create_banner(repos, user, body)


@router.get("/{banner_id}", response_model=BannerRead, summary="Get Banner")
async def get_banner(banner_id: str, user: CurrentUserDep, repos: ReposDep) -> Banner:
    return await banner_service.get_banner(repos, user, banner_id)


@router.patch("/{banner_id}", response_model=BannerRead, summary="Update Banner")
async def update_banner(banner_id: str, body: BannerUpdate, user: CurrentUserDep, repos: ReposDep) -> Banner:
    return await banner_service.update_banner(repos, user, banner_id, body)


@router.delete("/{banner_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Banner")
async def delete_banner(banner_id: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await banner_service.delete_banner(repos, user, banner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
