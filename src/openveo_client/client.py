"""Authenticated client for the OpenVeo Web Service.

The client authenticates with the OAuth2 client-credentials grant, sends the
bearer token with every request, and when the Web Service reports the token
as expired, re-authenticates and re-issues the request exactly once.

Example:
    ```python
    from openveo_client import OpenVeoClient

    with OpenVeoClient("client-id", "client-secret", base_url="https://openveo.example.org") as client:
        video = client.get("videos/42")
        client.post("videos/42", {"title": "New title"})
    ```
"""

import base64
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from openveo_client.auth.token import TokenState
from openveo_client.config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT, ClientSettings
from openveo_client.errors.exceptions import AuthenticationError, RequestError
from openveo_client.errors.handler import describe, is_token_expired
from openveo_client.errors.models import OAuthError, parse_error
from openveo_client.transport.http import Body, ResponseInfo, Transport

logger = logging.getLogger(__name__)

TOKEN_ENDPOINT = "token"


@dataclass(frozen=True)
class RequestDescriptor:
    """A call to a resource endpoint, replayable on token expiry."""

    method: str
    endpoint: str
    body: Body = None
    headers: Mapping[str, str] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)


class OpenVeoClient:
    """Client of the OpenVeo Web Service.

    Not safe for concurrent use without external synchronization, except for
    token refresh which is serialized by the token state lock.

    Args:
        client_id: The client id
        client_secret: The client secret
        host: Web Service host, with or without scheme (http:// by default)
        port: Web Service port, if any
        base_url: Full base URL, takes precedence over host and port
        certificate: Path to the trusted certificate file of the Web Service server
        timeout: Total timeout of a call in seconds
        connect_timeout: Connection timeout in seconds
        transport: Optional httpx transport, mostly useful for tests

    Raises:
        ConfigurationError: If host, client id or client secret is missing
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        host: str | None = None,
        port: int | str | None = None,
        *,
        base_url: str | None = None,
        certificate: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = ClientSettings(
            client_id=client_id,
            client_secret=client_secret,
            host=host,
            port=port,
            base_url=base_url,
            certificate=certificate,
            timeout=timeout,
            connect_timeout=connect_timeout,
        )
        settings.validate()

        self.base_url = settings.resolve_base_url()
        self._credentials = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode("ascii")
        self._token = TokenState()
        self._transport = Transport(
            certificate,
            timeout=timeout,
            connect_timeout=connect_timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs: Any) -> "OpenVeoClient":
        return cls(
            settings.client_id,
            settings.client_secret,
            settings.host,
            settings.port,
            base_url=settings.base_url,
            certificate=settings.certificate,
            timeout=settings.timeout,
            connect_timeout=settings.connect_timeout,
            **kwargs,
        )

    @classmethod
    def from_env(cls, *, dotenv_path: str | None = None, load_dotenv: bool = True, **kwargs: Any) -> "OpenVeoClient":
        """Build a client from ``OPENVEO_*`` environment variables (see ``ClientSettings.from_env``)."""
        return cls.from_settings(ClientSettings.from_env(dotenv_path=dotenv_path, load_dotenv=load_dotenv), **kwargs)

    def __enter__(self) -> "OpenVeoClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Forget the access token and release the transport session."""
        self._token.clear()
        self._transport.close()

    @property
    def is_authenticated(self) -> bool:
        return self._token.is_authenticated

    @property
    def transport(self) -> Transport:
        return self._transport

    def authenticate(self) -> str:
        """Get a new access token from the Web Service.

        Returns:
            The access token

        Raises:
            AuthenticationError: If credentials are rejected or no token is returned
            TransportError: If the Web Service cannot be reached
        """
        url = f"{self.base_url}/{TOKEN_ENDPOINT}"
        headers = {
            "Authorization": f"Basic {self._credentials}",
            "Content-Type": "application/json",
        }
        payload = json.dumps({"grant_type": "client_credentials"})

        with self._token.lock:
            self._token.begin()
            try:
                body, info = self._transport.execute(url, "POST", headers, payload)
                token = self._extract_token(body, info)
            except Exception:
                self._token.fail()
                raise
            self._token.succeed(token)

        logger.info(f"Authenticated to {self.base_url}")
        return token

    def _extract_token(self, body: Any, info: ResponseInfo) -> str:
        error = parse_error(body)
        if isinstance(error, OAuthError):
            raise AuthenticationError(error.description, info=info, body=body)

        token = body.get("access_token") if isinstance(body, dict) else None
        if token:
            return token

        if info.is_error:
            raise AuthenticationError(describe(info, body, TOKEN_ENDPOINT, "POST"), info=info, body=body)
        raise AuthenticationError("Authentication failed", info=info, body=body)

    def _ensure_token(self) -> str:
        with self._token.lock:
            if self._token.is_authenticated:
                return self._token.token
            return self.authenticate()

    def _send(self, descriptor: RequestDescriptor, token: str) -> tuple[Any, ResponseInfo]:
        url = f"{self.base_url}/{descriptor.endpoint.strip('/')}"
        headers = {**descriptor.headers, "Authorization": f"Bearer {token}"}
        logger.debug(f"Dispatching {descriptor.method} {descriptor.endpoint}")
        return self._transport.execute(url, descriptor.method, headers, descriptor.body, descriptor.options)

    def _reject(self, descriptor: RequestDescriptor, info: ResponseInfo, body: Any, message: str | None = None):
        if message is None:
            message = describe(info, body, descriptor.endpoint, descriptor.method)
        return RequestError(
            message,
            endpoint=descriptor.endpoint,
            method=descriptor.method,
            info=info,
            body=body,
        )

    def execute(self, descriptor: RequestDescriptor) -> Any:
        """Execute a request, re-authenticating once if the token expired.

        Args:
            descriptor: The request to execute

        Returns:
            The decoded response body

        Raises:
            AuthenticationError: If authentication fails
            RequestError: If the Web Service rejects the request
            TransportError: If the Web Service cannot be reached
        """
        token = self._ensure_token()
        body, info = self._send(descriptor, token)

        if not info.is_error:
            return body

        if not is_token_expired(body):
            raise self._reject(descriptor, info, body)

        logger.warning(f"Access token rejected on {descriptor.method} {descriptor.endpoint}, re-authenticating")
        self._token.invalidate(token)
        token = self._ensure_token()
        body, info = self._send(descriptor, token)

        error = parse_error(body)
        if isinstance(error, OAuthError):
            raise self._reject(descriptor, info, body, error.description)
        if info.is_error:
            raise self._reject(descriptor, info, body)

        return body

    def request(
        self,
        method: str,
        endpoint: str,
        body: Body = None,
        headers: Mapping[str, str] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Execute a request on an endpoint relative to the base URL.

        See ``execute`` for the authentication and retry behavior.
        """
        descriptor = RequestDescriptor(
            method=method.upper(),
            endpoint=endpoint,
            body=body,
            headers=dict(headers or {}),
            options=dict(options or {}),
        )
        return self.execute(descriptor)

    def get(
        self, endpoint: str, headers: Mapping[str, str] | None = None, options: Mapping[str, Any] | None = None
    ) -> Any:
        """Execute a GET request."""
        return self.request("GET", endpoint, headers=headers, options=options)

    def post(
        self,
        endpoint: str,
        fields: Body = None,
        headers: Mapping[str, str] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Execute a POST request.

        Args:
            endpoint: Endpoint relative to the base URL
            fields: Raw body, or a mapping of fields sent as multipart/form-data
            headers: Extra headers
            options: Extra transport options
        """
        return self.request("POST", endpoint, fields, headers, options)

    def put(
        self,
        endpoint: str,
        data: Body = None,
        headers: Mapping[str, str] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Execute a PUT request, ``data`` following the same rules as POST fields."""
        return self.request("PUT", endpoint, data, headers, options)

    def delete(
        self, endpoint: str, headers: Mapping[str, str] | None = None, options: Mapping[str, Any] | None = None
    ) -> Any:
        """Execute a DELETE request."""
        return self.request("DELETE", endpoint, headers=headers, options=options)
