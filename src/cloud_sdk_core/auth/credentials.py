"""Credentials file discovery and external configuration sources.

Services can be configured out of band through a credentials file, a plain
``KEY=value`` per line file parsed with python-dotenv.

Credentials file resolution order (first match wins):
1. ``IBM_CREDENTIALS_FILE`` pointing directly at a file
2. ``IBM_CREDENTIALS_FILE`` pointing at a directory holding ``ibm-credentials.env``
3. ``ibm-credentials.env`` in the current working directory
4. ``ibm-credentials.env`` in the home directory

Example:
    ```python
    from cloud_sdk_core.auth import read_credentials_file, read_external_sources

    # Everything in the discovered file
    record = read_credentials_file()

    # Only the MY_SERVICE_* properties, with the prefix removed
    properties = read_external_sources("my-service")
    service_url = properties.get("url")
    ```

Security Considerations:
    - Credential values are never logged, only file paths and key names
    - Reads are blocking; call these at service construction time, not per request
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from cloud_sdk_core.auth.exceptions import CredentialFileError

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_FILENAME = "ibm-credentials.env"
CREDENTIALS_FILE_ENV_VAR = "IBM_CREDENTIALS_FILE"

BOOLEAN_PROPERTIES = ("disable_ssl", "enable_gzip", "enable_retries")
INTEGER_PROPERTIES = ("max_retries",)
FLOAT_PROPERTIES = ("retry_interval",)


def file_exists_at_path(filepath: str | Path) -> bool:
    """Return True if filepath is an existing regular file or a symlink."""
    path = Path(filepath)
    return path.is_symlink() or path.is_file()


def construct_filepath(filepath: str | Path) -> str:
    """Ensure a path names the credentials file, appending the default filename if needed."""
    filepath = str(filepath)
    if not filepath.endswith(DEFAULT_CREDENTIALS_FILENAME):
        filepath = os.path.join(filepath, DEFAULT_CREDENTIALS_FILENAME)
    return filepath


def locate_credentials_file() -> str | None:
    """Find the credentials file to use.

    Returns:
        Path of the first credentials file found, or None if there is none.
    """
    given_filepath = os.environ.get(CREDENTIALS_FILE_ENV_VAR, "")
    candidates = []

    if given_filepath:
        # a file with any name, or the directory the default file lives in
        candidates.append(given_filepath)
        candidates.append(construct_filepath(given_filepath))

    candidates.append(construct_filepath(Path.cwd()))
    candidates.append(construct_filepath(Path.home()))

    for candidate in candidates:
        if file_exists_at_path(candidate):
            return candidate
    return None


def read_credentials_file() -> dict[str, str]:
    """Read the credentials file into a flat record.

    A missing file is not an error: it is logged at INFO level and an empty
    record is returned. Keys are case-sensitive; keys without a value are
    dropped. Values are taken literally, ``${NAME}`` is not expanded.

    Returns:
        Mapping of keys to values from the credentials file.
    """
    filepath = locate_credentials_file()
    if filepath is None:
        logger.info("Credential file does not exist. Will not be used")
        return {}

    values = dotenv_values(filepath, interpolate=False)
    logger.debug(f"Read {len(values)} entries from credentials file: {filepath}")
    return {key: value for key, value in values.items() if value is not None}


def read_cr_token_file(filepath: str | Path) -> str:
    """Read a compute resource token from a file.

    The file content is returned in full, without stripping. Invalid UTF-8
    bytes are replaced rather than failing the read.

    Args:
        filepath: Path of the token file.

    Returns:
        The token.

    Raises:
        CredentialFileError: If the file does not exist or is empty.
    """
    filepath = str(filepath)
    token = ""
    file_exists = file_exists_at_path(filepath)
    if file_exists:
        token = Path(filepath).read_text(encoding="utf-8", errors="replace")
        logger.debug(f"Successfully read CR token from file: {filepath}")

    if token == "":
        if file_exists:
            reason = f"Expected to read CR token from file but the file is empty: {filepath}"
        else:
            reason = f"Expected to find CR token file but the file does not exist: {filepath}"
        logger.error(reason)
        raise CredentialFileError(reason, path=filepath)

    return token


def filter_properties_by_service_name(source: Mapping[str, str], service_name: str) -> dict[str, Any]:
    """Select the properties of one service from a flat key/value source.

    Keys are matched on the ``<SERVICE_NAME>_`` prefix, where the service name
    is upper-cased with dashes turned into underscores. The prefix is removed
    and the rest lower-cased, so ``MY_SERVICE_DISABLE_SSL`` becomes
    ``disable_ssl``. Known flags and numbers are converted from strings.

    Args:
        source: Flat mapping such as a credentials record or ``os.environ``.
        service_name: Name of the service.

    Returns:
        The service's properties.
    """
    prefix = service_name.upper().replace("-", "_") + "_"
    properties: dict[str, Any] = {}
    for key, value in source.items():
        if key.startswith(prefix) and len(key) > len(prefix):
            properties[key[len(prefix) :].lower()] = value

    for name in BOOLEAN_PROPERTIES:
        if name in properties:
            properties[name] = str(properties[name]).lower() == "true"

    for name, convert in [(n, int) for n in INTEGER_PROPERTIES] + [(n, float) for n in FLOAT_PROPERTIES]:
        if name in properties:
            try:
                properties[name] = convert(properties[name])
            except (TypeError, ValueError):
                logger.warning(f"Ignoring {prefix}{name.upper()}: not a number")
                del properties[name]

    return properties


def read_external_sources(service_name: str) -> dict[str, Any]:
    """Read a service's properties from external configuration.

    Resolution order (first non-empty source wins):
    1. Credentials file
    2. Environment variables

    Args:
        service_name: Name of the service; selects the ``<SERVICE_NAME>_`` keys.

    Returns:
        The service's properties, empty if no source defines any.

    Raises:
        ValueError: If no service name is given.
    """
    if not service_name:
        raise ValueError("Service name is required.")

    properties = filter_properties_by_service_name(read_credentials_file(), service_name)
    source = "credentials file"
    if not properties:
        properties = filter_properties_by_service_name(os.environ, service_name)
        source = "environment variables"

    if properties:
        logger.debug(f"Read properties {sorted(properties)} for service '{service_name}' from {source}")
    return properties
