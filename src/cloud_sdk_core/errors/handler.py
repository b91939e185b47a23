"""Error handling utilities for HTTP responses."""

import logging
from typing import Any

import httpx

from cloud_sdk_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "Access is denied due to invalid credentials."

_EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitError,
}


def get_error_message(body: Any) -> str | None:
    """Extract a human-readable message from a service error body.

    Services report errors in a handful of shapes; the first one found wins:
    ``errors[0].message``, ``error.message``, ``error``, ``message``,
    ``errorMessage``.

    Args:
        body: Decoded JSON error body.

    Returns:
        The message, or None if the body has none of the known shapes.
    """
    if not isinstance(body, dict):
        return None

    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return str(errors[0]["message"])

    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if error:
        return str(error)

    for key in ("message", "errorMessage"):
        if body.get(key):
            return str(body[key])

    return None


def raise_for_status(response: httpx.Response) -> None:
    """Raise appropriate exception for HTTP error responses.

    Args:
        response: HTTP response object

    Raises:
        APIError subclass based on status code
    """
    if response.is_success:
        return

    status_code = response.status_code

    if status_code in _EXCEPTION_MAP:
        exc_class = _EXCEPTION_MAP[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    try:
        body = response.json()
    except ValueError:
        body = None

    message = get_error_message(body)
    if message is None:
        if status_code in (401, 403):
            message = ACCESS_DENIED_MESSAGE
        else:
            response_text = response.text[:200]
            message = f"HTTP {status_code}: {response_text}" if response_text else f"HTTP {status_code}"

    logger.debug(f"Service returned {status_code}: {message}")

    if exc_class is RateLimitError:
        retry_after = None
        if "retry-after" in response.headers:
            try:
                retry_after = int(response.headers["retry-after"])
            except (ValueError, TypeError):
                retry_after = None
        raise RateLimitError(
            message,
            retry_after=retry_after,
            status_code=status_code,
            response=response,
            body=body,
        )

    raise exc_class(message, status_code=status_code, response=response, body=body)
