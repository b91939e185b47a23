"""Authentication components for generated services.

This module provides:
- The authenticator interface and no-auth/basic/bearer implementations
- Credentials file discovery (``IBM_CREDENTIALS_FILE`` -> cwd -> home)
- Service-scoped external configuration and CR token file reading
- Sanity checks for pasted credential values

Example:
    ```python
    from cloud_sdk_core.auth import BasicAuthenticator, read_external_sources

    authenticator = BasicAuthenticator("user", "secret")
    properties = read_external_sources("my-service")
    ```
"""

from cloud_sdk_core.auth.authenticators import (
    Authenticator,
    BasicAuthenticator,
    BearerTokenAuthenticator,
    NoAuthAuthenticator,
)
from cloud_sdk_core.auth.credentials import (
    read_cr_token_file,
    read_credentials_file,
    read_external_sources,
)
from cloud_sdk_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialValidationError,
)
from cloud_sdk_core.auth.validation import check_credentials

__all__ = [
    "Authenticator",
    "BasicAuthenticator",
    "BearerTokenAuthenticator",
    "CredentialError",
    "CredentialFileError",
    "CredentialValidationError",
    "NoAuthAuthenticator",
    "check_credentials",
    "read_cr_token_file",
    "read_credentials_file",
    "read_external_sources",
]
