"""Unit tests for HTTP Basic authentication."""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPBasicCredentials

from src.infrastructure.api.middleware.auth import (
    BasicAuthCredentials,
    credentials_match,
    verify_basic_auth,
)

EXPECTED = BasicAuthCredentials(username="admin", password="s3cret")


def make_request(expected: BasicAuthCredentials = EXPECTED):
    return SimpleNamespace(
        app=SimpleNamespace(state=SimpleNamespace(auth_credentials=expected)),
        state=SimpleNamespace(),
    )


class TestCredentialsMatch:
    """Tests for credentials_match."""

    def test_match(self):
        assert credentials_match(
            HTTPBasicCredentials(username="admin", password="s3cret"), EXPECTED
        )

    @pytest.mark.parametrize(
        "username,password",
        [("admin", "wrong"), ("root", "s3cret"), ("admin", "s3cret-longer"), ("", "")],
    )
    def test_mismatch(self, username, password):
        assert not credentials_match(
            HTTPBasicCredentials(username=username, password=password), EXPECTED
        )


class TestVerifyBasicAuth:
    """Tests for verify_basic_auth dependency."""

    @pytest.mark.asyncio
    async def test_valid_credentials(self):
        request = make_request()

        user = await verify_basic_auth(
            request, HTTPBasicCredentials(username="admin", password="s3cret")
        )

        assert user == "admin"
        assert request.state.client_id == "admin"

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc_info:
            await verify_basic_auth(make_request(), None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers["WWW-Authenticate"].startswith("Basic")

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        with pytest.raises(HTTPException) as exc_info:
            await verify_basic_auth(
                make_request(), HTTPBasicCredentials(username="admin", password="nope")
            )

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_empty_configured_password_still_enforced(self):
        """An empty password is compared like any other value."""
        request = make_request(BasicAuthCredentials(username="admin", password=""))

        assert (
            await verify_basic_auth(
                request, HTTPBasicCredentials(username="admin", password="")
            )
            == "admin"
        )
        with pytest.raises(HTTPException):
            await verify_basic_auth(
                request, HTTPBasicCredentials(username="admin", password="x")
            )
