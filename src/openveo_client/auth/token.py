"""Bearer token state with explicit transitions.

A client holds at most one access token. The token goes through three
states::

    UNAUTHENTICATED --begin()--> AUTHENTICATING --succeed(token)--> AUTHENTICATED
           ^                            |                                |
           +----------fail()------------+                                |
           +-----------------invalidate(token) / clear()-----------------+

The holder carries a reentrant lock. Callers hold it around the whole
authentication sequence so that concurrent requests never refresh the
same token twice.
"""

import enum
import logging
from threading import RLock

logger = logging.getLogger(__name__)


class AuthState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class TokenState:
    """Hold the access token of a client and its authentication state.

    Example:
        ```python
        state = TokenState()

        with state.lock:
            state.begin()
            try:
                token = fetch_token()
            except Exception:
                state.fail()
                raise
            state.succeed(token)
        ```
    """

    def __init__(self) -> None:
        self.lock = RLock()
        self._state = AuthState.UNAUTHENTICATED
        self._token: str | None = None

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._state is AuthState.AUTHENTICATED

    def begin(self) -> None:
        """Enter AUTHENTICATING, dropping any token currently held."""
        with self.lock:
            if self._state is AuthState.AUTHENTICATING:
                raise RuntimeError("Authentication already in progress")
            self._token = None
            self._state = AuthState.AUTHENTICATING

    def succeed(self, token: str) -> None:
        """Store a freshly issued token."""
        with self.lock:
            if self._state is not AuthState.AUTHENTICATING:
                raise RuntimeError(f"Cannot store a token while {self._state.value}")
            if not token:
                raise ValueError("Access token must not be empty")
            self._token = token
            self._state = AuthState.AUTHENTICATED

    def fail(self) -> None:
        """Abort an authentication attempt."""
        with self.lock:
            if self._state is not AuthState.AUTHENTICATING:
                raise RuntimeError(f"No authentication in progress (state: {self._state.value})")
            self._state = AuthState.UNAUTHENTICATED

    def invalidate(self, token: str | None) -> bool:
        """Drop the held token if it is the one the server rejected.

        A token refreshed by another caller in the meantime is kept.

        Args:
            token: The token the rejected request was sent with

        Returns:
            True if the token was dropped
        """
        with self.lock:
            if self._state is not AuthState.AUTHENTICATED or self._token != token:
                return False
            self._token = None
            self._state = AuthState.UNAUTHENTICATED
            logger.debug("Dropped rejected access token")
            return True

    def clear(self) -> None:
        """Forget the token unconditionally."""
        with self.lock:
            self._token = None
            self._state = AuthState.UNAUTHENTICATED
