"""Helpers used by generated operation methods."""

from cloud_sdk_core.utils.files import (
    FileObject,
    FileOptions,
    FileValueKind,
    FileWithMetadata,
    build_request_file_object,
    get_content_type,
)
from cloud_sdk_core.utils.params import ValidationResult, get_missing_params, validate_params
from cloud_sdk_core.utils.urls import construct_service_url, get_query_param, strip_trailing_slash

__all__ = [
    "FileObject",
    "FileOptions",
    "FileValueKind",
    "FileWithMetadata",
    "ValidationResult",
    "build_request_file_object",
    "construct_service_url",
    "get_content_type",
    "get_missing_params",
    "get_query_param",
    "strip_trailing_slash",
    "validate_params",
]
