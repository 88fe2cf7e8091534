"""Error taxonomy and response classification for the OpenVeo client."""

from openveo_client.errors.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    OpenVeoError,
    RequestError,
    TransportError,
)
from openveo_client.errors.handler import TOKEN_EXPIRED_DESCRIPTIONS, describe, is_token_expired
from openveo_client.errors.models import ErrorPayload, OAuthError, ServiceError, parse_error

__all__ = [
    "TOKEN_EXPIRED_DESCRIPTIONS",
    "APIError",
    "AuthenticationError",
    "ConfigurationError",
    "ErrorPayload",
    "OAuthError",
    "OpenVeoError",
    "RequestError",
    "ServiceError",
    "TransportError",
    "describe",
    "is_token_expired",
    "parse_error",
]
