"""
Tests for AuthService — register / login / current user pipelines.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from auth.jwt import decode_token
from auth.password import dummy_hash, verify_password
from auth.service import AuthService
from utils.enums import ErrorCode, Role
from utils.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from utils.schemas import AuthPayload

# 100 ASCII chars, exactly 128 chars, and 48 chars / 88 bytes of UTF-8
LONG_PASSWORDS = ["Abcdef12" + "x" * 92, "Abcdef12" + "x" * 120, "Abcdef12" + "é" * 40]


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_public_user_and_token(self, service, settings):
        result = await service.register("a@b.com", "Abcdef12")

        assert isinstance(result, AuthPayload)
        assert result.user.email == "a@b.com"
        assert result.user.role == Role.USER
        assert result.user.name is None
        assert result.token
        assert decode_token(result.token, settings) == result.user.id
        assert "password" not in result.model_dump()["user"]

    @pytest.mark.asyncio
    async def test_email_is_normalized_and_name_trimmed(self, service, repository):
        result = await service.register("  Foo@Bar.COM ", "Abcdef12", "  Ada Lovelace ")

        assert result.user.email == "foo@bar.com"
        assert result.user.name == "Ada Lovelace"
        stored = await repository.get_by_email("foo@bar.com")
        assert stored is not None
        assert stored.password != "Abcdef12"
        assert stored.password.startswith("$2")

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts_case_insensitively(self, service):
        await service.register("foo@bar.com", "Abcdef12")

        with pytest.raises(ConflictError) as exc_info:
            await service.register("FOO@bar.com", "Zyxwvu98")

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == ErrorCode.USER_ALREADY_EXISTS

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["abcdef12", "ABCDEF12", "Abcdefgh", "Ab1"])
    async def test_weak_password_never_reaches_store(self, settings, password):
        repo = MagicMock()
        repo.get_by_email = AsyncMock(return_value=None)
        repo.create = AsyncMock()
        service = AuthService(repo, settings)

        with pytest.raises(ValidationError) as exc_info:
            await service.register("a@b.com", password)

        assert exc_info.value.status_code == 400
        repo.get_by_email.assert_not_awaited()
        repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_name_rejected(self, service):
        with pytest.raises(ValidationError, match="letters"):
            await service.register("a@b.com", "Abcdef12", "R2D2")

    @pytest.mark.asyncio
    async def test_bcrypt_rounds_come_from_settings(self, service, settings):
        with patch("auth.service.hash_password", return_value="$2b$hash") as mock_hash:
            await service.register("a@b.com", "Abcdef12")
        mock_hash.assert_called_once_with("Abcdef12", settings.bcrypt_rounds)

    @pytest.mark.asyncio
    async def test_concurrent_registration_yields_one_conflict(self, service, repository):
        results = await asyncio.gather(
            service.register("race@b.com", "Abcdef12"),
            service.register("Race@B.com", "Abcdef12"),
            return_exceptions=True,
        )

        successes = [r for r in results if isinstance(r, AuthPayload)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(successes) == 1
        assert len(conflicts) == 1
        assert len(repository.users) == 1

    @pytest.mark.asyncio
    async def test_non_unique_integrity_error_is_not_a_conflict(
        self, service, repository, integrity_error
    ):
        not_null = integrity_error("23502", 'null value in column "email" violates not-null constraint')
        repository.create = AsyncMock(side_effect=not_null)

        with pytest.raises(IntegrityError) as exc_info:
            await service.register("a@b.com", "Abcdef12")

        assert exc_info.value is not_null

    @pytest.mark.asyncio
    async def test_unique_violation_from_store_is_a_conflict(
        self, service, repository, integrity_error
    ):
        repository.create = AsyncMock(side_effect=integrity_error("23505"))

        with pytest.raises(ConflictError):
            await service.register("a@b.com", "Abcdef12")


class TestLogin:
    @pytest.mark.asyncio
    async def test_register_then_login(self, service, settings):
        registered = await service.register("foo@bar.com", "Abcdef12")

        result = await service.login("Foo@Bar.com", "Abcdef12")

        assert result.user.id == registered.user.id
        assert decode_token(result.token, settings) == registered.user.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, service):
        await service.register("a@b.com", "Abcdef12")

        with pytest.raises(AuthenticationError) as exc_info:
            await service.login("a@b.com", "wrong")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid email or password"
        assert exc_info.value.code == ErrorCode.AUTHENTICATION_FAILED

    @pytest.mark.asyncio
    async def test_unknown_user_is_indistinguishable(self, service):
        await service.register("a@b.com", "Abcdef12")

        with pytest.raises(AuthenticationError) as missing:
            await service.login("nobody@b.com", "Abcdef12")
        with pytest.raises(AuthenticationError) as wrong:
            await service.login("a@b.com", "Abcdef13")

        assert missing.value.message == wrong.value.message
        assert missing.value.code == wrong.value.code

    @pytest.mark.asyncio
    async def test_unknown_user_still_runs_a_comparison(self, service):
        with patch("auth.service.verify_password", return_value=False) as mock_verify:
            with pytest.raises(AuthenticationError):
                await service.login("nobody@b.com", "Abcdef12")
        mock_verify.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", LONG_PASSWORDS)
    async def test_long_password_register_then_login(self, service, password):
        registered = await service.register("long@b.com", password)

        result = await service.login("long@b.com", password)

        assert result.user.id == registered.user.id
        with pytest.raises(AuthenticationError):
            await service.login("long@b.com", "Abcdef12")

    @pytest.mark.asyncio
    async def test_unknown_user_with_long_password_still_compares(self, service, settings):
        password = LONG_PASSWORDS[0]
        with patch("auth.service.verify_password", wraps=verify_password) as mock_verify:
            with pytest.raises(AuthenticationError) as exc_info:
                await service.login("nobody@b.com", password)

        mock_verify.assert_called_once_with(password, dummy_hash(settings.bcrypt_rounds))
        assert exc_info.value.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_malformed_email_is_validation_error(self, service):
        with pytest.raises(ValidationError, match="Invalid email format"):
            await service.login("not-an-email", "Abcdef12")

    @pytest.mark.asyncio
    async def test_missing_password_is_validation_error(self, service):
        with pytest.raises(ValidationError, match="Password is required"):
            await service.login("a@b.com", "")


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_returns_public_view(self, service):
        registered = await service.register("a@b.com", "Abcdef12", "Ada")

        user = await service.get_current_user(registered.user.id)

        assert user.id == registered.user.id
        assert user.name == "Ada"
        assert not hasattr(user, "password")
        assert "password" not in user.model_dump(by_alias=True)

    @pytest.mark.asyncio
    async def test_deleted_user_is_not_found(self, service, repository):
        registered = await service.register("a@b.com", "Abcdef12")
        repository.delete(registered.user.id)

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_current_user(registered.user.id)

        assert exc_info.value.status_code == 404
        assert exc_info.value.code == ErrorCode.USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_non_uuid_id_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get_current_user("not-a-uuid")
