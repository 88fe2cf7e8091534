"""OpenVeo Client - REST client for the OpenVeo Web Service.

This library provides:
- OAuth2 client-credentials authentication with transparent token refresh
- A blocking JSON transport with session cookies and custom trusted certificates
- Diagnostic messages for rejected requests
- Configuration from the environment and .env files

Example:
    ```python
    from openveo_client import OpenVeoClient, RequestError

    with OpenVeoClient("client-id", "client-secret", "openveo.example.org", 3000) as client:
        try:
            videos = client.get("publish/videos", options={"params": {"limit": 10}})
        except RequestError as e:
            print(e)
    ```
"""

from openveo_client.client import OpenVeoClient, RequestDescriptor
from openveo_client.config import ClientSettings
from openveo_client.errors.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    OpenVeoError,
    RequestError,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "AuthenticationError",
    "ClientSettings",
    "ConfigurationError",
    "OpenVeoClient",
    "OpenVeoError",
    "RequestDescriptor",
    "RequestError",
    "TransportError",
    "__version__",
]
