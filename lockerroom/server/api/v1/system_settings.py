"""
System Setting Endpoints.

Runtime key/value settings such as the XEN Watch review price.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Response, status

from lockerroom.core.database.entities.system_settings import SystemSetting
from lockerroom.core.models.io.system_settings import SettingRead, SettingUpsert
from lockerroom.server.services import system_settings as settings_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["system-settings"])


@router.get("", response_model=List[SettingRead], summary="List Settings")
async def list_settings(user: CurrentUserDep, repos: ReposDep, category: Optional[str] = None) -> List[SystemSetting]:
    return await settings_service.list_settings(repos, user, category)


@router.get("/{key}", response_model=SettingRead, summary="Get Setting")
async def get_setting(key: str, user: CurrentUserDep, repos: ReposDep) -> SystemSetting:
    return await settings_service.get_setting(repos, user, key)


@router.put(
    "/{key}",
    response_model=SettingRead,
    summary="Create or Update Setting",
    description="`xen_watch_price_cents` must be a non-negative whole number.",
)
async def upsert_setting(key: str, body: SettingUpsert, user: CurrentUserDep, repos: ReposDep) -> SystemSetting:
    return await settings_service.upsert_setting(
        repos, user, key, value=body.value, category=body.category, description=body.description
    )


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Setting")
async def delete_setting(key: str, user: CurrentUserDep, repos: ReposDep) -> Response:
    await settings_service.delete_setting(repos, user, key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
