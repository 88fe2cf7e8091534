"""Blocking HTTP transport for the OpenVeo Web Service.

This module executes single HTTP calls on top of ``httpx.Client`` and knows
nothing about authentication. It owns the session resources of a client:

- A cookie jar persisted to a temporary ``cookies_*`` file, created at
  construction and removed when the transport is closed
- The trusted certificate used for TLS verification, if any

Example:
    ```python
    from openveo_client.transport import Transport

    with Transport(certificate="/etc/ssl/openveo.pem") as transport:
        body, info = transport.execute("https://openveo.example.org/videos", "GET")
        if info.status_code >= 400:
            ...
    ```
"""

import logging
import os
import ssl
import tempfile
import weakref
from collections.abc import Mapping
from dataclasses import dataclass, field
from http.cookiejar import MozillaCookieJar
from typing import Any

import httpx

from openveo_client.errors.exceptions import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

Body = str | bytes | Mapping[str, Any] | None

# Request body arguments of httpx, built from the body parameter only
RESERVED_OPTIONS: frozenset[str] = frozenset(["content", "data", "files", "json"])


@dataclass
class ResponseInfo:
    """Metadata of a transferred HTTP response."""

    method: str
    url: str
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        """Whether the server rejected the request (status >= 400)."""
        return self.status_code >= 400


def _remove_cookie_jar(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


class Transport:
    """Execute HTTP calls and decode their JSON responses.

    Client-wide defaults (``Accept: application/json`` header, timeouts,
    redirect policy) are merged under the per-call headers and options.

    Args:
        certificate: Path to the trusted certificate file of the Web Service
            server. Uses the system trust store when None.
        timeout: Total timeout of a call in seconds (default: 10)
        connect_timeout: Connection timeout in seconds (default: 1)
        transport: Optional httpx transport to send requests through,
            mostly useful for tests (``httpx.MockTransport``)

    Raises:
        ConfigurationError: If the certificate file cannot be loaded
    """

    DEFAULT_HEADERS: Mapping[str, str] = {"Accept": "application/json"}

    def __init__(
        self,
        certificate: str | None = None,
        *,
        timeout: float = 10.0,
        connect_timeout: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        verify: ssl.SSLContext | bool = True
        if certificate:
            try:
                verify = ssl.create_default_context(cafile=certificate)
            except (OSError, ssl.SSLError) as e:
                raise ConfigurationError(f"Cannot load trusted certificate {certificate}: {e}") from e

        self.certificate = certificate
        self.headers = httpx.Headers(self.DEFAULT_HEADERS)
        self.options: dict[str, Any] = {}

        fd, self.cookie_jar_path = tempfile.mkstemp(prefix="cookies_")
        os.close(fd)
        self._finalizer = weakref.finalize(self, _remove_cookie_jar, self.cookie_jar_path)
        self._cookies = MozillaCookieJar(self.cookie_jar_path)

        self._client = httpx.Client(
            cookies=self._cookies,
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            follow_redirects=False,
            verify=verify,
            transport=transport,
        )
        logger.debug(f"Created transport session (cookie jar: {self.cookie_jar_path})")

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """Release the HTTP connections and delete the cookie jar file."""
        if self.closed:
            return
        self._client.close()
        self._finalizer()
        logger.debug(f"Closed transport session (removed {self.cookie_jar_path})")

    def execute(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str] | None = None,
        body: Body = None,
        options: Mapping[str, Any] | None = None,
    ) -> tuple[Any, ResponseInfo]:
        """Execute a single HTTP call.

        Args:
            url: Absolute URL to call
            method: HTTP method
            headers: Extra headers, overriding the defaults
            body: Raw content, or a mapping of fields sent as multipart/form-data
            options: Extra ``httpx.Client.request`` keyword arguments
                (``timeout``, ``params``, ``follow_redirects``...), overriding the defaults.
                Option ``headers`` are merged under the explicit headers

        Returns:
            Decoded JSON body (None if empty or not JSON) and response metadata

        Raises:
            TransportError: If no HTTP response could be obtained
            ValueError: If options carry a body (``content``, ``data``, ``files``, ``json``)
        """
        if self.closed:
            raise TransportError("Transport is closed", url=url, method=method)

        method = method.upper()
        request_options = {**self.options, **(options or {})}
        reserved = RESERVED_OPTIONS.intersection(request_options)
        if reserved:
            raise ValueError(f"Options {sorted(reserved)} conflict with the request body, pass it as body instead")

        # Explicit headers win over option headers, which win over the defaults
        request_headers = httpx.Headers(self.headers)
        request_headers.update(request_options.pop("headers", None) or {})
        request_headers.update(headers or {})

        if isinstance(body, Mapping):
            # httpx sets the multipart content type along with its boundary
            request_headers.pop("content-type", None)
            request_options["files"] = {name: (None, self._encode_field(value)) for name, value in body.items()}
        elif body is not None:
            request_options["content"] = body

        try:
            response = self._client.request(method, url, headers=request_headers, **request_options)
        except httpx.TransportError as e:
            logger.warning(f"Request {method} {url} failed: {e!r}")
            raise TransportError(f"Can't reach the server ({e})", url=url, method=method, reason=str(e)) from e

        self._cookies.save(ignore_discard=True, ignore_expires=True)

        info = ResponseInfo(
            method=method,
            url=url,
            status_code=response.status_code,
            headers=dict(response.headers),
        )
        logger.debug(f"{method} {url} -> {response.status_code}")

        return self._decode(response), info

    @staticmethod
    def _encode_field(value: Any) -> str | bytes:
        if isinstance(value, (str, bytes)):
            return value
        return str(value)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            # Empty or non-JSON body
            return None
