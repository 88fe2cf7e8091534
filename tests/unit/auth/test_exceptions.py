"""Tests for credential resolution exceptions."""

import pytest

from openveo_client.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from openveo_client.errors.exceptions import ConfigurationError


class TestCredentialError:
    """Test CredentialError base exception."""

    def test_is_configuration_error(self):
        """Test that credential errors are configuration errors."""
        with pytest.raises(ConfigurationError):
            raise CredentialError("Test error")

    def test_exception_message(self):
        """Test that exception message is preserved."""
        try:
            raise CredentialError("Custom error message")
        except CredentialError as e:
            assert str(e) == "Custom error message"


class TestCredentialNotFoundError:
    """Test CredentialNotFoundError exception."""

    def test_is_credential_error(self):
        """Test that CredentialNotFoundError is a CredentialError."""
        with pytest.raises(CredentialError):
            raise CredentialNotFoundError("Test error")

    def test_env_var_name_attribute(self):
        """Test that env_var_name attribute is set."""
        try:
            raise CredentialNotFoundError("Test error", env_var_name="OPENVEO_CLIENT_ID")
        except CredentialNotFoundError as e:
            assert e.env_var_name == "OPENVEO_CLIENT_ID"

    def test_env_var_name_optional(self):
        """Test that env_var_name is optional."""
        assert CredentialNotFoundError("Test error").env_var_name is None


class TestCredentialFileError:
    """Test CredentialFileError exception."""

    def test_is_credential_error(self):
        """Test that CredentialFileError is a CredentialError."""
        with pytest.raises(CredentialError):
            raise CredentialFileError("File not found: /path/to/secret")
