"""Unit tests for password hashing, tokens and role checks."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from lockerroom.core.database.entities.users import User
from lockerroom.core.errors import AuthenticationError, ConflictError, DomainValidationError, PermissionDeniedError
from lockerroom.server.core.config import settings
from lockerroom.server.services import auth


class TestPasswordHashing:
    def test_hash_format(self):
        hashed = auth.hash_password("password123", rounds=1000)
        method, salt, digest = hashed.split("$")
        assert method == "pbkdf2:sha256:1000"
        assert salt
        assert len(digest) == 64

    def test_salts_differ(self):
        assert auth.hash_password("password123", rounds=1000) != auth.hash_password("password123", rounds=1000)

    def test_verify_roundtrip(self):
        hashed = auth.hash_password("password123", rounds=1000)
        assert auth.verify_password("password123", hashed)
        assert not auth.verify_password("password124", hashed)

    @pytest.mark.parametrize(
        "stored",
        [
            "",
            "plain",
            "bcrypt$10$abcd$ef",
            "md5$1$00$00",
            "pbkdf2:sha256:notanumber$salt$00",
            "pbkdf2:nosuchdigest:1000$salt$00",
            "pbkdf2_sha256$1000$zz$00",
        ],
    )
    def test_verify_rejects_unknown_formats(self, stored):
        assert auth.verify_password("password123", stored) is False


class TestAccessTokens:
    def _user(self, **kwargs) -> User:
        return User(id="u1", email="a@example.com", name="A", role="student", password_hash="x", **kwargs)

    def test_claims(self):
        token = auth.create_access_token(self._user(school_id="s1"))
        claims = auth.decode_access_token(token)
        assert claims["sub"] == "u1"
        assert claims["role"] == "student"
        assert claims["school_id"] == "s1"
        assert "exp" in claims

    def test_expired_token_is_rejected(self):
        expired = jwt.encode(
            {"sub": "u1", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            settings.auth.jwt_secret,
            algorithm=settings.auth.jwt_algorithm,
        )
        with pytest.raises(AuthenticationError, match="expired"):
            auth.decode_access_token(expired)

    def test_tampered_token_is_rejected(self):
        forged = jwt.encode({"sub": "u1"}, "another-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError, match="Invalid token"):
            auth.decode_access_token(forged)

    def test_token_without_subject_is_rejected(self):
        token = jwt.encode({"role": "student"}, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)
        with pytest.raises(AuthenticationError):
            auth.decode_access_token(token)


class TestEnsureRoles:
    def _user(self, role: str) -> User:
        return User(id="u1", email="a@example.com", name="A", role=role, password_hash="x")

    def test_allowed_role_passes(self):
        auth.ensure_roles(self._user("finance"), "finance", "analyst")

    def test_system_admin_always_passes(self):
        auth.ensure_roles(self._user("system_admin"), "student")

    def test_other_role_is_denied(self):
        with pytest.raises(PermissionDeniedError):
            auth.ensure_roles(self._user("viewer"), "student")

    def test_any_listed_role_passes(self):
        auth.ensure_roles(self._user("finance"), "system_admin", "finance")

    def test_higher_ranked_role_is_not_implied(self):
        with pytest.raises(PermissionDeniedError):
            auth.ensure_roles(self._user("scout_admin"), "xen_scout")


@pytest.mark.asyncio
class TestAccounts:
    async def test_register_normalises_email(self, repos):
        user = await auth.register(repos, email="  Fan@Example.COM ", password="password123", name=" Fan ")
        assert user.email == "fan@example.com"
        assert user.name == "Fan"
        assert user.role == "viewer"

    async def test_register_only_viewers(self, repos):
        with pytest.raises(PermissionDeniedError):
            await auth.register(repos, email="x@example.com", password="password123", name="X", role="scout_admin")

    async def test_duplicate_email_conflicts(self, repos, factory):
        await factory.user("viewer", email="dup@example.com")
        with pytest.raises(ConflictError):
            await auth.register(repos, email="DUP@example.com", password="password123", name="Dup")

    async def test_short_password(self, repos):
        with pytest.raises(DomainValidationError):
            await auth.register(repos, email="short@example.com", password="short", name="Short")

    async def test_login(self, repos, factory):
        user = await factory.user("student", email="login@example.com")
        token, logged_in = await auth.login(repos, email="login@example.com", password="password123")
        assert logged_in.id == user.id
        assert auth.decode_access_token(token)["sub"] == user.id

    async def test_login_wrong_password(self, repos, factory):
        await factory.user("student", email="login@example.com")
        with pytest.raises(AuthenticationError):
            await auth.login(repos, email="login@example.com", password="wrong-password")

    async def test_login_frozen_account(self, repos, factory):
        user = await factory.user("student", email="frozen@example.com")
        user.is_frozen = True
        await repos.users.update(user)
        with pytest.raises(PermissionDeniedError):
            await auth.login(repos, email="frozen@example.com", password="password123")

    async def test_authenticate_token(self, repos, factory):
        user = await factory.user("coach")
        resolved = await auth.authenticate_token(repos, auth.create_access_token(user))
        assert resolved.id == user.id

    async def test_change_password(self, repos, factory):
        user = await factory.user("viewer")
        with pytest.raises(DomainValidationError):
            await auth.change_password(repos, user, current_password="nope-nope", new_password="newpassword1")
        await auth.change_password(repos, user, current_password="password123", new_password="newpassword1")
        assert auth.verify_password("newpassword1", user.password_hash)
