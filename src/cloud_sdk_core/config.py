"""Service option resolution.

Options for a service come from three places, applied in order:
1. Per-service defaults (empty querystring, the class's default service URL)
2. Options passed to the service constructor
3. Normalizations (trailing slash stripped from the URL, SSL flag coerced)

``configure_service`` later overlays properties read from external
configuration (credentials file or environment) on top of the result.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from cloud_sdk_core.auth.credentials import read_external_sources
from cloud_sdk_core.auth.validation import check_credentials
from cloud_sdk_core.errors.exceptions import ServiceConfigurationError
from cloud_sdk_core.utils.urls import strip_trailing_slash

if TYPE_CHECKING:
    import httpx

    from cloud_sdk_core.auth.authenticators import Authenticator

logger = logging.getLogger(__name__)


@dataclass
class ServiceOptions:
    """Normalized configuration of a service instance.

    Attributes:
        authenticator: Authenticates every request. Required.
        service_url: Base URL of the service, never ending in ``/``.
        headers: Headers sent with every request.
        version: API version date, ``YYYY-MM-DD``.
        disable_ssl_verification: Skip TLS certificate verification. Only True
            when explicitly set to True.
        jar: Cookie jar to use, or a bool flag.
        enable_gzip_compression: Gzip request bodies.
        enable_retries: Retry failed requests.
        max_retries: Maximum number of retries.
        retry_interval: Maximum backoff between retries, in seconds.
        qs: Querystring sent with every request.
        transport: Base httpx transport, mostly for tests.
        extra: Any other constructor option, kept as given.
    """

    authenticator: "Authenticator | None" = None
    service_url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    version: str | None = None
    disable_ssl_verification: bool = False
    jar: Any = None
    enable_gzip_compression: bool = False
    enable_retries: bool = False
    max_retries: int | None = None
    retry_interval: float | None = None
    qs: dict[str, Any] = field(default_factory=dict)
    transport: "httpx.AsyncBaseTransport | None" = None
    extra: dict[str, Any] = field(default_factory=dict)


OPTION_FIELDS = frozenset(f.name for f in fields(ServiceOptions)) - {"extra"}


def resolve_service_options(
    user_options: Mapping[str, Any] | None,
    *,
    default_service_url: str | None = None,
) -> ServiceOptions:
    """Merge defaults and constructor options into normalized service options.

    Args:
        user_options: Options passed to the service constructor. The legacy
            ``url`` key is accepted in place of ``service_url``.
        default_service_url: The service's default URL.

    Returns:
        Normalized ServiceOptions.

    Raises:
        CredentialValidationError: If the service URL looks like a pasted credential.
        ServiceConfigurationError: If no authenticator is given.
    """
    options = dict(user_options or {})

    # for compatibility
    legacy_url = options.pop("url", None)
    if legacy_url and not options.get("service_url"):
        options["service_url"] = legacy_url

    normalized: dict[str, Any] = {}
    if options.get("service_url"):
        normalized["service_url"] = strip_trailing_slash(options["service_url"])

    credential_problems = check_credentials(options, ["service_url"])
    if credential_problems:
        logger.error(str(credential_problems))
        raise credential_problems

    normalized["disable_ssl_verification"] = options.get("disable_ssl_verification") is True

    merged = {"qs": {}, "service_url": default_service_url, **options, **normalized}
    known = {key: value for key, value in merged.items() if key in OPTION_FIELDS}
    extra = {key: value for key, value in merged.items() if key not in OPTION_FIELDS}
    known["headers"] = dict(known.get("headers") or {})
    known["qs"] = dict(known.get("qs") or {})

    if not known.get("authenticator"):
        message = "Authenticator must be set."
        logger.error(f"Error creating service: {message}")
        raise ServiceConfigurationError(message)

    return ServiceOptions(**known, extra=extra)


def read_options_from_external_config(service_name: str) -> dict[str, Any]:
    """Map a service's external properties onto option fields.

    Only ``url``, ``disable_ssl``, ``enable_gzip``, ``enable_retries``,
    ``max_retries`` and ``retry_interval`` are used. The two SSL/gzip flags are
    only applied when they are True.

    Args:
        service_name: Name of the service in external configuration.

    Returns:
        Option field names mapped to their external values.
    """
    results: dict[str, Any] = {}
    properties = read_external_sources(service_name)

    url = properties.get("url")
    if url:
        results["service_url"] = strip_trailing_slash(url)
    if properties.get("disable_ssl") is True:
        results["disable_ssl_verification"] = True
    if properties.get("enable_gzip") is True:
        results["enable_gzip_compression"] = True
    for name in ("enable_retries", "max_retries", "retry_interval"):
        if properties.get(name) is not None:
            results[name] = properties[name]

    return results


def apply_external_config(options: ServiceOptions, service_name: str) -> dict[str, Any]:
    """Overwrite options in place with a service's external configuration.

    Fields without an external value are left untouched.

    Returns:
        The fields that were overwritten.
    """
    updates = read_options_from_external_config(service_name)
    for name, value in updates.items():
        setattr(options, name, value)
    if updates:
        logger.debug(f"Applied external configuration for '{service_name}': {sorted(updates)}")
    return updates
