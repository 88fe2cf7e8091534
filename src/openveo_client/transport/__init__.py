"""Transport layer executing single HTTP calls.

The transport decodes JSON responses and reports failures to reach the
server as ``TransportError``. HTTP error statuses are returned, not raised:
interpreting them is the job of the authenticated client.
"""

from openveo_client.transport.http import Body, ResponseInfo, Transport

__all__ = ["Body", "ResponseInfo", "Transport"]
