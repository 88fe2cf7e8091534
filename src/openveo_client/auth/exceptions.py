"""Exceptions for credential resolution.

Credential errors are configuration errors: they are raised while building a
client, before any network activity.

Example:
    ```python
    from openveo_client.auth.exceptions import CredentialNotFoundError

    if not client_id:
        raise CredentialNotFoundError("Client id not found", env_var_name="OPENVEO_CLIENT_ID")
    ```
"""

from openveo_client.errors.exceptions import ConfigurationError


class CredentialError(ConfigurationError):
    """Base exception for credential-related errors."""

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved from any source.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read."""

    pass
