"""Error taxonomy and HTTP error handling for generated services."""

from cloud_sdk_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    InvalidUrlVariableError,
    NotFoundError,
    ParameterValidationError,
    RateLimitError,
    ServerError,
    ServiceConfigurationError,
    UnauthorizedError,
)
from cloud_sdk_core.errors.handler import get_error_message, raise_for_status

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "ForbiddenError",
    "InvalidUrlVariableError",
    "NotFoundError",
    "ParameterValidationError",
    "RateLimitError",
    "ServerError",
    "ServiceConfigurationError",
    "UnauthorizedError",
    "get_error_message",
    "raise_for_status",
]
