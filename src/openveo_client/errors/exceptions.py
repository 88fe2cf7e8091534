"""Structured exceptions for OpenVeo client errors."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from openveo_client.transport.http import ResponseInfo


class OpenVeoError(Exception):
    """Base exception for every error raised by the client."""

    pass


class ConfigurationError(OpenVeoError):
    """Invalid or missing construction parameters.

    Raised synchronously, before any network activity.
    """

    pass


class TransportError(OpenVeoError):
    """The transfer never reached the server (no HTTP status available).

    ``reason`` holds the low-level transfer error, if any.
    """

    def __init__(
        self, message: str, url: str | None = None, method: str | None = None, reason: str | None = None
    ):
        super().__init__(message)
        self.url = url
        self.method = method
        self.reason = reason


class APIError(OpenVeoError):
    """Base exception for responses rejected by the Web Service."""

    def __init__(
        self,
        message: str,
        info: "ResponseInfo | None" = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.info = info
        self.body = body

    @property
    def status_code(self) -> int | None:
        return self.info.status_code if self.info is not None else None


class AuthenticationError(APIError):
    """Token endpoint rejected the credentials or returned no token."""

    pass


class RequestError(APIError):
    """Resource endpoint answered with status >= 400."""

    def __init__(self, message: str, endpoint: str | None = None, method: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.endpoint = endpoint
        self.method = method
