"""Authentication components of the OpenVeo client.

- ``TokenState``: access token holder with explicit state transitions
- ``CredentialResolver``: credential lookup from values, environment, .env and files
"""

from openveo_client.auth.credentials import CredentialResolver
from openveo_client.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from openveo_client.auth.token import AuthState, TokenState

__all__ = [
    "AuthState",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "TokenState",
]
