"""HTTP transport used by services to send authenticated requests.

``RequestWrapper`` owns the ``httpx.AsyncClient`` of a service and turns the
request description built by a generated operation into an HTTP request:

```python
parameters = {
    "options": {
        "method": "POST",
        "url": "/v1/workspaces/{workspace_id}/files",
        "path": {"workspace_id": "abc"},
        "qs": {"version": "2024-01-01"},
        "form_data": {"file": FileWithMetadata(data=open("a.csv", "rb"))},
    },
    "default_options": {
        "service_url": "https://api.example.com",
        "headers": {"Accept": "application/json"},
    },
}
response = await wrapper.send_request(parameters)
```
"""

import gzip
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from http.cookiejar import CookieJar
from typing import Any
from urllib.parse import quote

import httpx

from cloud_sdk_core.config import ServiceOptions
from cloud_sdk_core.errors.handler import raise_for_status
from cloud_sdk_core.transport.retry import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_INTERVAL, RetryTransport
from cloud_sdk_core.utils.files import FileObject, build_request_file_object, is_file_data, is_file_with_metadata

logger = logging.getLogger(__name__)


@dataclass
class DetailedResponse:
    """Result of a service request."""

    result: Any
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)


class RequestWrapper:
    """Send service requests over an ``httpx.AsyncClient``.

    Args:
        options: The service's normalized options. ``disable_ssl_verification``,
            ``jar``, ``transport``, ``enable_gzip_compression`` and the retry
            settings are read at construction and by ``reconfigure``.
    """

    def __init__(self, options: ServiceOptions | None = None):
        self._options = options or ServiceOptions()
        self._compress_request_data = self._options.enable_gzip_compression
        self._verify = not self._options.disable_ssl_verification
        self._base_transport = self._options.transport or httpx.AsyncHTTPTransport(verify=self._verify)
        self._retry_transport: RetryTransport | None = None
        if self._options.enable_retries:
            self._retry_transport = self._build_retry_transport(
                self._options.max_retries, self._options.retry_interval
            )
        self._retired_clients: list[httpx.AsyncClient] = []
        self._client = self._build_client()

    def _build_client(self) -> httpx.AsyncClient:
        jar = self._options.jar
        cookies = jar if isinstance(jar, (CookieJar, httpx.Cookies)) else None
        return httpx.AsyncClient(
            transport=self._retry_transport or self._base_transport,
            cookies=cookies,
        )

    def _build_retry_transport(self, max_retries: int | None, retry_interval: float | None) -> RetryTransport:
        return RetryTransport(
            wrapped_transport=self._base_transport,
            max_retries=max_retries if max_retries is not None else DEFAULT_MAX_RETRIES,
            max_backoff=retry_interval if retry_interval is not None else DEFAULT_RETRY_INTERVAL,
        )

    def get_http_client(self) -> httpx.AsyncClient:
        return self._client

    @property
    def compress_request_data(self) -> bool:
        return self._compress_request_data

    def set_compress_request_data(self, setting: bool) -> None:
        self._compress_request_data = setting

    @property
    def retry_transport(self) -> RetryTransport | None:
        return self._retry_transport

    def enable_retries(self, max_retries: int | None = None, retry_interval: float | None = None) -> None:
        """Retry failed requests.

        The HTTP client is rebuilt on top of a RetryTransport; cookies already
        collected by the old client are carried over.

        Args:
            max_retries: Maximum number of retries (default: 4).
            retry_interval: Maximum backoff between retries in seconds (default: 30).
        """
        self._retry_transport = self._build_retry_transport(max_retries, retry_interval)
        self._swap_client()

    def disable_retries(self) -> None:
        self._retry_transport = None
        self._swap_client()

    def _swap_client(self) -> None:
        cookies = self._client.cookies
        self._client = self._build_client()
        self._client.cookies = cookies

    def reconfigure(self, options: ServiceOptions) -> None:
        """Apply changed options to the existing client.

        The base transport and its connection pool are kept unless the SSL
        verification setting changed. A replaced client is closed by
        ``aclose``. Cookies and retries enabled earlier carry over.

        Args:
            options: The service's updated options.
        """
        self._options = options
        self._compress_request_data = options.enable_gzip_compression

        verify = not options.disable_ssl_verification
        if options.transport is None and verify != self._verify:
            logger.debug(f"SSL verification changed to {verify}, replacing base transport")
            self._retired_clients.append(self._client)
            self._verify = verify
            self._base_transport = httpx.AsyncHTTPTransport(verify=verify)

        if options.enable_retries:
            self._retry_transport = self._build_retry_transport(options.max_retries, options.retry_interval)
        elif self._retry_transport is not None:
            self._retry_transport = self._build_retry_transport(
                self._retry_transport.max_retries, self._retry_transport.max_backoff
            )
        self._swap_client()

    async def aclose(self) -> None:
        for client in self._retired_clients:
            await client.aclose()
        self._retired_clients.clear()
        await self._client.aclose()

    async def send_request(self, parameters: Mapping[str, Any]) -> DetailedResponse:
        """Send the request described by parameters.

        Args:
            parameters: Mapping with ``options`` (method, url, path, qs, body,
                form, form_data, headers) and ``default_options``
                (service_url, headers, qs).

        Returns:
            DetailedResponse with the decoded body.

        Raises:
            APIError: For non-2xx responses.
            httpx.HTTPError: For transport failures.
        """
        options = parameters.get("options") or {}
        default_options = parameters.get("default_options") or {}

        url = build_request_url(default_options.get("service_url") or "", options.get("url") or "", options.get("path"))
        params = {
            key: value
            for key, value in {**(default_options.get("qs") or {}), **(options.get("qs") or {})}.items()
            if value is not None
        }
        headers = {**(default_options.get("headers") or {}), **(options.get("headers") or {})}
        method = (options.get("method") or "GET").upper()

        request_kwargs: dict[str, Any] = {}
        content = encode_body(options.get("body"), headers)
        if options.get("form"):
            request_kwargs["data"] = {key: value for key, value in options["form"].items() if value is not None}
        elif options.get("form_data"):
            request_kwargs["files"] = await build_multipart(options["form_data"])

        if content is not None:
            if self._compress_request_data:
                content = gzip.compress(content)
                headers["Content-Encoding"] = "gzip"
            request_kwargs["content"] = content

        logger.debug(f"Sending {method} {url}")
        response = await self._client.request(method, url, params=params, headers=headers, **request_kwargs)
        raise_for_status(response)

        return DetailedResponse(
            result=decode_body(response),
            status_code=response.status_code,
            headers=response.headers,
        )


def build_request_url(service_url: str, path_template: str, path_params: Mapping[str, Any] | None) -> str:
    """Join the service URL and an operation path, filling ``{name}`` path parameters."""
    path = path_template
    for name, value in (path_params or {}).items():
        path = path.replace(f"{{{name}}}", quote(str(value), safe=""))
    return f"{service_url}{path}"


def encode_body(body: Any, headers: dict[str, str]) -> bytes | None:
    """Encode a request body, defaulting the content type of JSON bodies."""
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    if not any(key.lower() == "content-type" for key in headers):
        headers["Content-Type"] = "application/json"
    return json.dumps(body).encode("utf-8")


def decode_body(response: httpx.Response) -> Any:
    """Decode JSON and text responses; other bodies stay bytes."""
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.json()
    if content_type.startswith("text/"):
        return response.text
    return response.content


async def build_multipart(form_data: Mapping[str, Any]) -> list[tuple[str, Any]]:
    """Turn form data into multipart parts.

    Strings are sent as is, mappings as JSON, file values as file parts; lists
    contribute one part per element and None values are skipped. Plain fields
    are file-less parts, so the body is multipart even without a file.

    Returns:
        The ``files`` argument for ``httpx.AsyncClient.request``.
    """
    parts: list[tuple[str, Any]] = []

    for key, value in form_data.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            if item is None:
                continue
            if isinstance(item, FileObject) or is_file_with_metadata(item) or is_file_data(item):
                if not is_file_with_metadata(item):
                    item = {"data": item}
                file_obj = await build_request_file_object(item)
                parts.append((key, (file_obj.options.filename, file_obj.value, file_obj.options.content_type)))
            elif isinstance(item, Mapping):
                parts.append((key, (None, json.dumps(item), "application/json")))
            else:
                parts.append((key, (None, str(item))))

    return parts
