"""Construction-time configuration of the OpenVeo client."""

import logging
from dataclasses import dataclass
from pathlib import Path

from openveo_client.auth.credentials import CredentialResolver
from openveo_client.errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_CONNECT_TIMEOUT = 1.0


@dataclass(frozen=True)
class ClientSettings:
    """Everything needed to build a client.

    Either ``base_url`` or ``host`` (optionally with ``port``) locates the
    Web Service.
    """

    client_id: str
    client_secret: str
    host: str | None = None
    port: int | str | None = None
    base_url: str | None = None
    certificate: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    def __repr__(self) -> str:
        return (
            f"ClientSettings(client_id={self.client_id!r}, client_secret='***', "
            f"base_url={self.resolve_base_url()!r}, certificate={self.certificate!r})"
        )

    def validate(self) -> None:
        """Check the mandatory settings.

        Raises:
            ConfigurationError: If the host, client id or client secret is missing
        """
        if not (self.host or self.base_url) or not self.client_id or not self.client_secret:
            raise ConfigurationError("Host, client id and client secret are required to create an OpenVeo client")

    def resolve_base_url(self) -> str | None:
        """Build the base URL all endpoints are relative to."""
        if self.base_url:
            return self.base_url.rstrip("/")
        if not self.host:
            return None

        host = self.host.strip("/")
        base_url = host if "://" in host else f"http://{host}"
        if self.port:
            base_url += f":{self.port}"
        return base_url

    @classmethod
    def from_env(
        cls,
        *,
        dotenv_path: str | Path | None = None,
        load_dotenv: bool = True,
        prefix: str = "OPENVEO_",
    ) -> "ClientSettings":
        """Load settings from the environment and an optional .env file.

        Variables (with the default prefix): ``OPENVEO_CLIENT_ID``,
        ``OPENVEO_CLIENT_SECRET`` or ``OPENVEO_CLIENT_SECRET_FILE``,
        ``OPENVEO_BASE_URL`` or ``OPENVEO_HOST`` and ``OPENVEO_PORT``,
        ``OPENVEO_CERTIFICATE``, ``OPENVEO_TIMEOUT``, ``OPENVEO_CONNECT_TIMEOUT``.

        Raises:
            CredentialNotFoundError: If the client id or secret is not set
            ConfigurationError: If no location is set or a timeout is not a number
        """
        resolver = CredentialResolver(dotenv_path=dotenv_path, load_dotenv=load_dotenv)

        client_id = resolver.resolve(env_var_name=f"{prefix}CLIENT_ID", required=True)
        client_secret = resolver.resolve(
            value=resolver.resolve_from_file(env_var_name=f"{prefix}CLIENT_SECRET_FILE"),
            env_var_name=f"{prefix}CLIENT_SECRET",
            required=True,
        )

        timeouts = {}
        for name, default in (("timeout", DEFAULT_TIMEOUT), ("connect_timeout", DEFAULT_CONNECT_TIMEOUT)):
            env_var_name = f"{prefix}{name.upper()}"
            raw = resolver.resolve(env_var_name=env_var_name, default=str(default))
            try:
                timeouts[name] = float(raw)
            except ValueError:
                raise ConfigurationError(f"{env_var_name} must be a number of seconds, got {raw!r}") from None

        settings = cls(
            client_id=client_id,
            client_secret=client_secret,
            host=resolver.resolve(env_var_name=f"{prefix}HOST"),
            port=resolver.resolve(env_var_name=f"{prefix}PORT"),
            base_url=resolver.resolve(env_var_name=f"{prefix}BASE_URL"),
            certificate=resolver.resolve(env_var_name=f"{prefix}CERTIFICATE"),
            **timeouts,
        )
        settings.validate()
        logger.debug(f"Loaded {settings!r} from environment")
        return settings
