"""
Authentication Service.

Password hashing, bearer token issue/verification, registration, login
and role checks shared by every other service.

Passwords are stored in Werkzeug's ``pbkdf2:sha256:<rounds>$<salt>$<hex digest>`` form.
Tokens are HS256 JWTs carrying ``sub``, ``role``, ``school_id`` and ``exp``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import (
    AuthenticationError,
    ConflictError,
    DomainValidationError,
    PermissionDeniedError,
)
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.roles import Role, is_system_admin
from lockerroom.server.core.config import settings

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8
SELF_REGISTER_ROLES = frozenset({Role.viewer.value})


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    rounds = rounds or settings.auth.password_hash_rounds
    return generate_password_hash(password, method=f"pbkdf2:sha256:{rounds}")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored hash; malformed hashes never match."""
    if not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        logger.warning("Stored password hash has an unsupported format")
        return False


def create_access_token(user: User, expires_minutes: Optional[int] = None) -> str:
    """
    Issue a signed bearer token for a user.

    Args:
        user: The authenticated user.
        expires_minutes: Override the configured lifetime.

    Returns:
        The encoded JWT.
    """
    auth = settings.auth
    expires = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes or auth.jwt_expires_minutes)
    claims = {"sub": user.id, "role": user.role, "school_id": user.school_id, "exp": expires}
    return jwt.encode(claims, auth.jwt_secret, algorithm=auth.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a bearer token and return its claims.

    Raises:
        AuthenticationError: If the token is expired, tampered or malformed.
    """
    auth = settings.auth
    try:
        claims = jwt.decode(token, auth.jwt_secret, algorithms=[auth.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise AuthenticationError("Invalid token") from e
    if not claims.get("sub"):
        raise AuthenticationError("Invalid token")
    return claims


async def authenticate_token(repos: SqlRepoBundle, token: str) -> User:
    """Resolve a bearer token to its user, rejecting unknown or frozen accounts."""
    claims = decode_access_token(token)
    user = await repos.users.get_by_id(claims["sub"])
    if user is None:
        raise AuthenticationError("User no longer exists")
    if user.is_frozen:
        raise PermissionDeniedError("Account is frozen")
    return user


def ensure_roles(user: User, *roles: Role | str) -> None:
    """
    Require the user to hold one of ``roles``.

    ``system_admin`` passes every check.

    Raises:
        PermissionDeniedError: If the user's role is not allowed.
    """
    if is_system_admin(user.role):
        return
    allowed = {Role(r).value for r in roles}
    if user.role not in allowed:
        raise PermissionDeniedError("You do not have permission to perform this action")


def _validate_new_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise DomainValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


async def create_user(
    repos: SqlRepoBundle,
    *,
    email: str,
    password: str,
    name: str,
    role: Role | str,
    school_id: Optional[str] = None,
    commit: bool = True,
) -> User:
    """
    Create an account after checking e-mail uniqueness.

    Args:
        repos: Repository bundle bound to the request session.
        email: Login e-mail; compared case-insensitively.
        password: Plain text password, hashed before storage.
        name: Display name.
        role: Role of the account.
        school_id: School the account belongs to, if any.
        commit: When False the row is only flushed so callers can add more in the same unit.

    Returns:
        The persisted user.

    Raises:
        ConflictError: If the e-mail is already taken.
    """
    email = email.strip().lower()
    if "@" not in email:
        raise DomainValidationError("A valid e-mail address is required")
    if role not in {r.value for r in Role}:
        raise DomainValidationError(f"Unknown role '{role}'")
    _validate_new_password(password)
    if await repos.users.get_by_email(email) is not None:
        raise ConflictError("An account with this email already exists")

    user = User(
        email=email,
        name=name.strip(),
        role=Role(role).value,
        school_id=school_id,
        password_hash=hash_password(password),
    )
    if commit:
        return await repos.users.create(user)
    repos.session.add(user)
    await repos.session.flush()
    return user


async def register(repos: SqlRepoBundle, *, email: str, password: str, name: str, role: str = "viewer") -> User:
    if role not in SELF_REGISTER_ROLES:
        raise PermissionDeniedError("Only viewer accounts can be self-registered")
    user = await create_user(repos, email=email, password=password, name=name, role=role)
    logger.info(f"Registered new {user.role} account {user.id}")
    return user


async def login(repos: SqlRepoBundle, *, email: str, password: str) -> tuple[str, User]:
    """
    Check credentials and issue a token.

    Returns:
        Tuple of (access token, user).

    Raises:
        AuthenticationError: On unknown e-mail or wrong password.
        PermissionDeniedError: If the account is frozen.
    """
    user = await repos.users.get_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Rejected login attempt")
        raise AuthenticationError("Invalid email or password")
    if user.is_frozen:
        raise PermissionDeniedError("Account is frozen")
    return create_access_token(user), user


async def change_password(repos: SqlRepoBundle, user: User, *, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise DomainValidationError("Current password is incorrect")
    _validate_new_password(new_password)
    user.password_hash = hash_password(new_password)
    await repos.users.update(user)
    logger.info(f"Password changed for user {user.id}")
