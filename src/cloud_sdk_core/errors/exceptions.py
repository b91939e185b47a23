"""Structured exceptions for service configuration and API errors."""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


class ServiceConfigurationError(Exception):
    """Raised when a service instance is misconfigured.

    Covers a missing authenticator, a missing service name passed to
    ``configure_service`` and a missing service URL at dispatch time.
    """

    pass


class InvalidUrlVariableError(ValueError):
    """Raised when a parameterized URL is given an unknown variable name.

    Attributes:
        name: The offending variable name.
        valid_names: Sorted list of the variable names the template accepts.
    """

    def __init__(self, name: str, valid_names: Iterable[str]):
        self.name = name
        self.valid_names = sorted(valid_names)
        super().__init__(
            f"'{name}' is an invalid variable name.\nValid variable names: [{', '.join(self.valid_names)}]."
        )


class ParameterValidationError(Exception):
    """Describes missing and unexpected operation parameters.

    Instances are returned by ``validate_params`` rather than raised so that
    generated operation methods decide whether to reject the call.
    """

    def __init__(self, missing: Iterable[str] = (), invalid: Iterable[str] = ()):
        self.missing = list(missing)
        self.invalid = list(invalid)

        lines = ["Parameter validation errors:"]
        if self.missing:
            lines.append(f"  Missing required parameters: {', '.join(self.missing)}")
        if self.invalid:
            lines.append(f"  Found invalid parameters: {', '.join(self.invalid)}")
        super().__init__("\n".join(lines))


class APIError(Exception):
    """Base exception for errors returned by a service."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response
        self.body = body


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx server errors."""

    pass
