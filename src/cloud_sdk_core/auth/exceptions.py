"""Custom exceptions for credential handling and authentication.

Example:
    ```python
    from cloud_sdk_core.auth.exceptions import CredentialFileError

    try:
        token = read_cr_token_file("/var/run/secrets/tokens/sa-token")
    except CredentialFileError as e:
        print(f"Cannot read token: {e.path}")
    ```
"""


class CredentialError(Exception):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialFileError(CredentialError):
    """Raised when a credential value cannot be read from a file.

    The same exception is used whether the file is missing or empty; the
    message tells the two apart.

    Attributes:
        path: The file path that was read.
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class CredentialValidationError(CredentialError, ValueError):
    """Raised when a configuration value looks like a pasted credential.

    Attributes:
        keys: The option names whose values failed the check.
    """

    def __init__(self, message: str, keys: list[str] | None = None):
        super().__init__(message)
        self.keys = keys if keys is not None else []
