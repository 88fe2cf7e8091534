"""Testing utilities for code using the OpenVeo client.

``MockWebService`` is an in-memory fake of the Web Service served through
``httpx.MockTransport``: it issues tokens on ``POST /token``, checks bearer
tokens on every other endpoint and records each request it receives.

Example:
    ```python
    import httpx
    from openveo_client.testing import MockWebService

    service = MockWebService()
    service.add("GET", "videos/1", httpx.Response(200, json={"id": "1"}))

    with service.client() as client:
        assert client.get("videos/1") == {"id": "1"}

    assert len(service.token_requests) == 1
    ```
"""

import base64
import itertools
from collections import defaultdict, deque
from collections.abc import Callable

import httpx

from openveo_client.client import OpenVeoClient

Handler = httpx.Response | Callable[[httpx.Request], httpx.Response]

BASE_URL = "https://openveo.example.org"
TOKEN_PATH = "/token"


def oauth_error(status_code: int, error: str, description: str) -> httpx.Response:
    """Build an OAuth2 error response (``error`` / ``error_description`` pair)."""
    return httpx.Response(status_code, json={"error": error, "error_description": description})


def service_error(status_code: int, code: int, module: str, message: str | None = None) -> httpx.Response:
    """Build a structured resource error response."""
    error = {"code": code, "module": module}
    if message is not None:
        error["message"] = message
    return httpx.Response(status_code, json={"error": error})


class MockWebService:
    """Fake OpenVeo Web Service.

    Args:
        client_id: Client id accepted by the token endpoint
        client_secret: Client secret accepted by the token endpoint
        base_url: Base URL the service answers on
        reachable: When False, every request fails with ``httpx.ConnectError``

    Attributes:
        requests: Every request received, in order
        expired: Tokens rejected as "Token not found or expired"
    """

    def __init__(
        self,
        client_id: str = "client-id",
        client_secret: str = "client-secret",
        base_url: str = BASE_URL,
        reachable: bool = True,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url
        self.reachable = reachable
        self.requests: list[httpx.Request] = []
        self.expired: set[str] = set()
        self.issued: list[str] = []
        self._counter = itertools.count(1)
        self._routes: dict[tuple[str, str], deque[Handler]] = defaultdict(deque)
        self._token_responses: deque[Handler] = deque()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def token_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == TOKEN_PATH]

    @property
    def resource_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path != TOKEN_PATH]

    def client(self, **kwargs) -> OpenVeoClient:
        """Build a client talking to this service."""
        kwargs.setdefault("base_url", self.base_url)
        return OpenVeoClient(self.client_id, self.client_secret, transport=self.transport, **kwargs)

    def add(self, method: str, endpoint: str, *handlers: Handler) -> None:
        """Queue responses for an endpoint.

        Handlers are consumed in order, the last one answers every further call.
        """
        self._routes[(method.upper(), f"/{endpoint.strip('/')}")].extend(handlers)

    def add_token_response(self, *handlers: Handler) -> None:
        """Queue responses overriding the token endpoint, consumed once each."""
        self._token_responses.extend(handlers)

    def expire(self, token: str | None = None) -> None:
        """Expire a token, the last issued one by default."""
        self.expired.add(token or self.issued[-1])

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if not self.reachable:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

        if request.url.path == TOKEN_PATH:
            return self._issue_token(request)

        authorization = request.headers.get("authorization", "")
        token = authorization.removeprefix("Bearer ")
        if not authorization.startswith("Bearer ") or token not in self.issued:
            return oauth_error(401, "invalid_token", "Token not found or expired")
        if token in self.expired:
            return oauth_error(401, "invalid_token", "Token already expired")

        handlers = self._routes.get((request.method, request.url.path))
        if not handlers:
            return httpx.Response(404)

        handler = handlers.popleft() if len(handlers) > 1 else handlers[0]
        return self._respond(handler, request)

    @staticmethod
    def _respond(handler: Handler, request: httpx.Request) -> httpx.Response:
        if callable(handler):
            return handler(request)
        # A fresh response per call, queued ones can answer several requests
        return httpx.Response(handler.status_code, headers=handler.headers, content=handler.content)

    def _issue_token(self, request: httpx.Request) -> httpx.Response:
        if self._token_responses:
            return self._respond(self._token_responses.popleft(), request)

        credentials = base64.b64encode(f"{self.client_id}:{self.client_secret}".encode()).decode("ascii")
        if request.headers.get("authorization") != f"Basic {credentials}":
            return oauth_error(401, "invalid_client", "Invalid client credentials")

        token = f"token-{next(self._counter)}"
        self.issued.append(token)
        return httpx.Response(200, json={"access_token": token, "token_type": "Bearer"})
