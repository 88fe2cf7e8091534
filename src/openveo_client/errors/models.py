"""Error payloads carried by Web Service response bodies."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ServiceError:
    """Structured error object returned by resource endpoints.

    Shape: ``{"error": {"code": ..., "module": ..., "message": ...}}``,
    ``message`` being optional.
    """

    code: Any
    module: Any
    message: str | None = None

    @classmethod
    def from_body(cls, body: Any) -> "ServiceError | None":
        """Parse the structured error object from a decoded body.

        Args:
            body: Decoded JSON body

        Returns:
            ServiceError or None if the body carries no such object
        """
        if not isinstance(body, dict):
            return None

        error = body.get("error")
        if not isinstance(error, dict):
            return None

        # code and module identify the error, message is only informative
        if "code" not in error or "module" not in error:
            return None

        return cls(code=error["code"], module=error["module"], message=error.get("message"))

    def to_message(self) -> str:
        """Convert the error object to a diagnostic message."""
        if self.message:
            return f"Error: {self.message} (code={self.code}, module={self.module})"
        return f"Error (code={self.code}, module={self.module})"


@dataclass(frozen=True)
class OAuthError:
    """OAuth2 error pair returned by the token endpoint and on token rejection.

    Shape: ``{"error": "...", "error_description": "..."}``.
    """

    error: str
    description: str

    @classmethod
    def from_body(cls, body: Any) -> "OAuthError | None":
        if not isinstance(body, dict):
            return None

        error = body.get("error")
        description = body.get("error_description")
        if error is None or isinstance(error, dict) or description is None:
            return None

        return cls(error=str(error), description=str(description))


ErrorPayload = ServiceError | OAuthError


def parse_error(body: Any) -> ErrorPayload | None:
    """Decode the error carried by a response body, if any.

    The structured ``error`` object is checked first, then the OAuth2 pair.

    Args:
        body: Decoded JSON body (or None)

    Returns:
        ServiceError, OAuthError, or None when the body carries no structured error
    """
    service_error = ServiceError.from_body(body)
    if service_error is not None:
        return service_error
    return OAuthError.from_body(body)
