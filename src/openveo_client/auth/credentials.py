"""Resolution of OpenVeo client credentials from several sources.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable (including values loaded from a .env file)
3. Default value

Secrets can also be read from a file, whose path is given directly or through
an environment variable (e.g. ``OPENVEO_CLIENT_SECRET_FILE``).

Example:
    ```python
    from openveo_client.auth import CredentialResolver

    resolver = CredentialResolver()
    client_id = resolver.resolve(env_var_name="OPENVEO_CLIENT_ID", required=True)
    client_secret = resolver.resolve_from_file(env_var_name="OPENVEO_CLIENT_SECRET_FILE")
    ```

Credential values are never logged, only the source they came from.
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from openveo_client.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve credentials from explicit values, environment and files.

    Args:
        dotenv_path: Path to the .env file. If None, python-dotenv searches
            the current directory and its parents.
        load_dotenv: Whether to load the .env file into the environment.
            Values already in the environment are never overridden.
    """

    def __init__(self, dotenv_path: str | Path | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                found = load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug(f"Loaded .env file for OpenVeo settings: {found}")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Resolve a credential, first match wins.

        Args:
            value: Explicit value, ignores every other source when not None
            env_var_name: Environment variable to read
            default: Value used when no other source provides one
            required: Raise instead of returning None when nothing is found

        Returns:
            Resolved value or None

        Raises:
            CredentialNotFoundError: If required and not found
        """
        if value is not None:
            logger.debug("Resolved credential from explicit parameter: ***")
            return value

        if env_var_name and os.environ.get(env_var_name):
            logger.debug(f"Resolved credential from environment variable '{env_var_name}': ***")
            return os.environ[env_var_name]

        if default is not None:
            return default

        if required:
            message = "Required credential not found"
            if env_var_name:
                message += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(message, env_var_name=env_var_name)

        return None

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential from a file.

        The path supports ``~`` and ``$VAR`` expansion. File contents are
        stripped of surrounding whitespace.

        Args:
            file_path: Path of the file holding the credential
            env_var_name: Environment variable holding the path, used when
                file_path is None
            required: Raise instead of returning None when the file cannot be read

        Returns:
            File contents or None

        Raises:
            CredentialFileError: If required and the file cannot be read
        """
        path = str(file_path) if file_path is not None else self.resolve(env_var_name=env_var_name)

        if not path:
            if required:
                message = "No file path provided for credential resolution"
                if env_var_name:
                    message += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(message)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path)))

        try:
            content = path_obj.read_text().strip()
        except FileNotFoundError:
            message = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(message) from None
            logger.debug(message)
            return None
        except OSError as e:
            message = f"Error reading credential file {path_obj}: {e}"
            if required:
                raise CredentialFileError(message) from e
            logger.warning(message)
            return None

        logger.debug(f"Resolved credential from file: {path_obj} (***)")
        return content
