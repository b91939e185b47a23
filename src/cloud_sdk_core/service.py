"""Base class for generated services.

The base service holds the normalized options of a service, authenticates
every request through its authenticator and sends it with its request wrapper.

Example:
    ```python
    from cloud_sdk_core import BaseService
    from cloud_sdk_core.auth import BearerTokenAuthenticator


    class WidgetsV1(BaseService):
        DEFAULT_SERVICE_URL = "https://widgets.example.com"
        DEFAULT_SERVICE_NAME = "widgets"

        def __init__(self, **options):
            super().__init__(**options)
            self.configure_service(self.DEFAULT_SERVICE_NAME)

        async def get_widget(self, widget_id: str):
            return await self.create_request(
                {
                    "options": {"method": "GET", "url": "/v1/widgets/{id}", "path": {"id": widget_id}},
                    "default_options": self.default_request_options(),
                }
            )


    service = WidgetsV1(authenticator=BearerTokenAuthenticator("token"))
    ```
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from cloud_sdk_core.auth.authenticators import Authenticator
from cloud_sdk_core.config import ServiceOptions, apply_external_config, resolve_service_options
from cloud_sdk_core.errors.exceptions import ServiceConfigurationError
from cloud_sdk_core.transport.request_wrapper import DetailedResponse, RequestWrapper
from cloud_sdk_core.utils.urls import strip_trailing_slash

logger = logging.getLogger(__name__)


class BaseService:
    """Common functionality shared by generated service classes.

    Args:
        user_options: Service options, see ServiceOptions. Keyword arguments
            are merged on top.

    Raises:
        ServiceConfigurationError: If no authenticator is given.
        CredentialValidationError: If the service URL looks like a pasted credential.
    """

    DEFAULT_SERVICE_URL: str | None = None
    DEFAULT_SERVICE_NAME: str | None = None

    def __init__(self, user_options: Mapping[str, Any] | None = None, **kwargs: Any):
        options = {**(user_options or {}), **kwargs}
        self._base_options = resolve_service_options(options, default_service_url=type(self).DEFAULT_SERVICE_URL)
        self._authenticator: Authenticator = self._base_options.authenticator
        self._request_wrapper = RequestWrapper(self._base_options)

    @property
    def base_options(self) -> ServiceOptions:
        return self._base_options

    def get_authenticator(self) -> Authenticator:
        return self._authenticator

    def set_service_url(self, url: str) -> None:
        """Set the service URL to send requests to. Empty values are ignored."""
        if url:
            self._base_options.service_url = strip_trailing_slash(url)

    def set_default_headers(self, headers: Mapping[str, str]) -> None:
        """Replace the headers sent with every request. Non-mappings are ignored."""
        if not isinstance(headers, Mapping):
            return
        self._base_options.headers = dict(headers)

    def set_enable_gzip_compression(self, setting: bool) -> None:
        """Turn request body compression on or off."""
        self._request_wrapper.set_compress_request_data(setting)
        self._base_options.enable_gzip_compression = setting

    def get_http_client(self) -> httpx.AsyncClient:
        """Return the HTTP client all requests are sent with."""
        return self._request_wrapper.get_http_client()

    def enable_retries(self, max_retries: int | None = None, retry_interval: float | None = None) -> None:
        """Retry failed requests, see RequestWrapper.enable_retries."""
        self._request_wrapper.enable_retries(max_retries=max_retries, retry_interval=retry_interval)

    def disable_retries(self) -> None:
        self._request_wrapper.disable_retries()

    def default_request_options(self, headers: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Build the ``default_options`` of a request from the current options.

        Args:
            headers: Per-operation headers, merged over the service headers.
        """
        return {
            "service_url": self._base_options.service_url,
            "headers": {**self._base_options.headers, **(headers or {})},
            "qs": dict(self._base_options.qs),
        }

    def configure_service(self, service_name: str) -> None:
        """Configure the service from external configuration.

        Properties found for the service (credentials file, then environment)
        overwrite the current options; the request wrapper is reconfigured so
        the new SSL, gzip and retry settings take effect.

        Args:
            service_name: Name of the service in external configuration.

        Raises:
            ServiceConfigurationError: If service_name is empty.
        """
        if not service_name:
            message = "Error configuring service. Service name is required."
            logger.error(message)
            raise ServiceConfigurationError(message)

        apply_external_config(self._base_options, service_name)
        self._request_wrapper.reconfigure(self._base_options)

    async def create_request(self, parameters: Mapping[str, Any]) -> DetailedResponse:
        """Authenticate and send a request.

        The authenticator runs first and may add headers to
        ``parameters["default_options"]``; the request is only sent once it
        succeeds. Authentication errors propagate unchanged.

        Args:
            parameters: Mapping with ``options`` (method, url, path, qs, body,
                form, form_data, headers) and ``default_options``
                (service_url, headers, qs).

        Returns:
            DetailedResponse of the request.

        Raises:
            ServiceConfigurationError: If ``default_options`` has no service URL.
        """
        default_options = parameters.get("default_options") or {}
        service_url = default_options.get("service_url")
        if not service_url or not isinstance(service_url, str):
            raise ServiceConfigurationError("The service URL is required")

        await self._authenticator.authenticate(default_options)
        return await self._request_wrapper.send_request(parameters)

    async def aclose(self) -> None:
        await self._request_wrapper.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
