"""
Authentication Endpoints.

Self registration for viewer accounts and e-mail/password login issuing
bearer tokens.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.io.users import LoginRequest, RegisterRequest, TokenResponse, UserRead
from lockerroom.server.services import auth as auth_service
from lockerroom.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a viewer account and return an access token. Other roles are created by administrators.",
    responses={
        201: {"description": "Account created"},
        403: {"description": "Requested role cannot self register"},
        409: {"description": "E-mail already registered"},
    },
)
async def register(body: RegisterRequest, repos: ReposDep) -> TokenResponse:
    user = await auth_service.register(
        repos, email=body.email, password=body.password, name=body.name, role=body.role
    )
    token = auth_service.create_access_token(user)
    return TokenResponse(access_token=token, user=UserRead.model_validate(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Exchange e-mail and password for a bearer token.",
    responses={
        200: {"description": "Authenticated"},
        401: {"description": "Invalid e-mail or password"},
        403: {"description": "Account is frozen"},
    },
)
async def login(body: LoginRequest, repos: ReposDep) -> TokenResponse:
    """
    Log in with e-mail and password.

    The e-mail is matched case-insensitively. Send the returned token as
    ``Authorization: Bearer <token>`` on subsequent requests.
    """
    token, user = await auth_service.login(repos, email=body.email, password=body.password)
    return TokenResponse(access_token=token, user=UserRead.model_validate(user))
