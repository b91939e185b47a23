"""Tests for credential exceptions."""

import pytest

from cloud_sdk_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialValidationError,
)


class TestCredentialError:
    """Test CredentialError base exception."""

    def test_can_be_raised(self):
        """Test that CredentialError can be raised."""
        with pytest.raises(CredentialError):
            raise CredentialError("Test error")

    def test_exception_message(self):
        """Test that exception message is preserved."""
        try:
            raise CredentialError("Custom error message")
        except CredentialError as e:
            assert str(e) == "Custom error message"


class TestCredentialFileError:
    """Test CredentialFileError exception."""

    def test_inherits_from_credential_error(self):
        assert issubclass(CredentialFileError, CredentialError)

    def test_stores_path(self):
        error = CredentialFileError("Token file is empty", path="/tmp/token")

        assert str(error) == "Token file is empty"
        assert error.path == "/tmp/token"

    def test_path_defaults_to_none(self):
        assert CredentialFileError("Missing").path is None


class TestCredentialValidationError:
    """Test CredentialValidationError exception."""

    def test_is_credential_error_and_value_error(self):
        assert issubclass(CredentialValidationError, CredentialError)
        assert issubclass(CredentialValidationError, ValueError)

    def test_stores_keys(self):
        error = CredentialValidationError("bad", keys=["service_url"])

        assert error.keys == ["service_url"]
        assert CredentialValidationError("bad").keys == []
