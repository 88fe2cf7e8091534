"""Error classification for Web Service responses."""

from typing import TYPE_CHECKING, Any

from openveo_client.errors.models import OAuthError, ServiceError, parse_error

if TYPE_CHECKING:
    from openveo_client.transport.http import ResponseInfo

# Descriptions the Web Service uses when a bearer token is no longer valid.
# Matched exactly: a wording change upstream disables expiry detection.
TOKEN_EXPIRED_DESCRIPTIONS: frozenset[str] = frozenset(["Token not found or expired", "Token already expired"])


def describe(info: "ResponseInfo", body: Any, endpoint: str, method: str) -> str:
    """Build a human-readable diagnostic for a rejected response.

    Status 403, 401 and 404 take precedence over the body. Otherwise a
    structured ``error`` object is used, and finally a generic message
    embedding the HTTP status.

    Args:
        info: Metadata of the rejected response
        body: Decoded response body
        endpoint: Requested endpoint, relative to the base URL
        method: HTTP method of the request

    Returns:
        Diagnostic message
    """
    status_code = info.status_code

    if status_code == 403:
        return f"Not authorized to access {method.upper()} {endpoint}"
    if status_code == 401:
        return "Authentication failed, verify your credentials"
    if status_code == 404:
        return f"Resource {endpoint} not found"

    error = parse_error(body)
    if isinstance(error, ServiceError):
        return error.to_message()

    return f"Unknown error (http_code={status_code})"


def is_token_expired(body: Any) -> bool:
    """Tell if a response body reports the bearer token as expired or unknown."""
    error = parse_error(body)
    return isinstance(error, OAuthError) and error.description in TOKEN_EXPIRED_DESCRIPTIONS
