"""Authenticator interface and simple authenticator implementations.

Every request a service sends first passes through its authenticator, which
may add credentials to the request headers. Token-based schemes (IAM,
container, ...) implement the same interface in their own packages.

Example:
    ```python
    from cloud_sdk_core.auth import BearerTokenAuthenticator

    authenticator = BearerTokenAuthenticator("eyJhbGciOi...")
    service = MyService(authenticator=authenticator)
    ```
"""

import base64
from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from typing import Any

from cloud_sdk_core.auth.validation import check_credentials


class Authenticator(ABC):
    """Interface each authentication mechanism must implement."""

    AUTHTYPE_BASIC = "basic"
    AUTHTYPE_BEARERTOKEN = "bearerToken"
    AUTHTYPE_NOAUTH = "noAuth"
    AUTHTYPE_UNKNOWN = "unknown"

    @abstractmethod
    async def authenticate(self, request_options: MutableMapping[str, Any]) -> None:
        """Add credentials to a request.

        Args:
            request_options: The request's default options. Implementations
                mutate ``request_options["headers"]`` in place.
        """

    def authentication_type(self) -> str:
        return self.AUTHTYPE_UNKNOWN

    @staticmethod
    def _headers(request_options: MutableMapping[str, Any]) -> MutableMapping[str, str]:
        headers = request_options.get("headers")
        if headers is None:
            headers = request_options["headers"] = {}
        return headers


class NoAuthAuthenticator(Authenticator):
    """Send requests without credentials."""

    async def authenticate(self, request_options: MutableMapping[str, Any]) -> None:
        return None

    def authentication_type(self) -> str:
        return self.AUTHTYPE_NOAUTH


class BasicAuthenticator(Authenticator):
    """Apply HTTP Basic auth headers.

    Raises:
        ValueError: If username or password is missing.
        CredentialValidationError: If either value is wrapped in quotes or braces.
    """

    def __init__(self, username: str, password: str):
        if not username or not password:
            raise ValueError("Both username and password are required.")
        problems = check_credentials({"username": username, "password": password}, ["username", "password"])
        if problems:
            raise problems

        self.username = username
        self.password = password
        encoded = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        self._authorization = f"Basic {encoded}"

    async def authenticate(self, request_options: MutableMapping[str, Any]) -> None:
        self._headers(request_options)["Authorization"] = self._authorization

    def authentication_type(self) -> str:
        return self.AUTHTYPE_BASIC


class BearerTokenAuthenticator(Authenticator):
    """Apply an already issued bearer token."""

    def __init__(self, bearer_token: str):
        if not bearer_token:
            raise ValueError("A bearer token is required.")
        self.bearer_token = bearer_token

    def set_bearer_token(self, bearer_token: str) -> None:
        self.bearer_token = bearer_token

    async def authenticate(self, request_options: MutableMapping[str, Any]) -> None:
        self._headers(request_options)["Authorization"] = f"Bearer {self.bearer_token}"

    def authentication_type(self) -> str:
        return self.AUTHTYPE_BEARERTOKEN
