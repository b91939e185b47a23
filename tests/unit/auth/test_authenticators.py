"""Tests for the authenticator implementations."""

import base64

import pytest

from cloud_sdk_core.auth import (
    Authenticator,
    BasicAuthenticator,
    BearerTokenAuthenticator,
    CredentialValidationError,
    NoAuthAuthenticator,
)


class TestAuthenticatorInterface:
    """Test the abstract interface."""

    def test_cannot_instantiate_interface(self):
        with pytest.raises(TypeError):
            Authenticator()

    async def test_custom_authenticator(self):
        class ApiKeyAuthenticator(Authenticator):
            async def authenticate(self, request_options):
                self._headers(request_options)["X-API-Key"] = "key"

        request_options = {}
        await ApiKeyAuthenticator().authenticate(request_options)

        assert request_options["headers"] == {"X-API-Key": "key"}
        assert ApiKeyAuthenticator().authentication_type() == Authenticator.AUTHTYPE_UNKNOWN


class TestNoAuthAuthenticator:
    async def test_leaves_headers_alone(self):
        request_options = {"headers": {"Accept": "application/json"}}

        await NoAuthAuthenticator().authenticate(request_options)

        assert request_options == {"headers": {"Accept": "application/json"}}

    def test_authentication_type(self):
        assert NoAuthAuthenticator().authentication_type() == "noAuth"


class TestBasicAuthenticator:
    async def test_sets_authorization_header(self):
        request_options = {"headers": {"Accept": "application/json"}}

        await BasicAuthenticator("user", "pass").authenticate(request_options)

        expected = "Basic " + base64.b64encode(b"user:pass").decode()
        assert request_options["headers"] == {"Accept": "application/json", "Authorization": expected}

    def test_requires_username_and_password(self):
        with pytest.raises(ValueError):
            BasicAuthenticator("", "pass")
        with pytest.raises(ValueError):
            BasicAuthenticator("user", None)

    def test_rejects_quoted_values(self):
        with pytest.raises(CredentialValidationError) as exc_info:
            BasicAuthenticator('"user"', "pass")

        assert exc_info.value.keys == ["username"]

    def test_authentication_type(self):
        assert BasicAuthenticator("user", "pass").authentication_type() == "basic"


class TestBearerTokenAuthenticator:
    async def test_sets_bearer_header_when_headers_missing(self):
        request_options = {}

        await BearerTokenAuthenticator("abc123").authenticate(request_options)

        assert request_options["headers"]["Authorization"] == "Bearer abc123"

    async def test_token_can_be_replaced(self):
        authenticator = BearerTokenAuthenticator("old")
        authenticator.set_bearer_token("new")
        request_options = {"headers": {}}

        await authenticator.authenticate(request_options)

        assert request_options["headers"]["Authorization"] == "Bearer new"

    def test_requires_token(self):
        with pytest.raises(ValueError):
            BearerTokenAuthenticator("")
